"""Chess API with Swagger documentation."""

from flask import Blueprint
from flask_restx import Api

# Create the main API blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')

# Create the API with Swagger documentation
api = Api(
    api_bp,
    version='1.0',
    title='Chess Rules API',
    description='RESTful driver for the chess rules engine',
    doc='/docs'
)

# Import and register namespaces
from .game import ns as game_ns
from .moves import ns as moves_ns
from .persistence import ns as persistence_ns

api.add_namespace(game_ns)
api.add_namespace(moves_ns)
api.add_namespace(persistence_ns)
