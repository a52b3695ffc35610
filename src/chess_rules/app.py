"""Flask application serving the chess rules engine."""

from flask import Flask, jsonify
from flask_session import Session
from asgiref.wsgi import WsgiToAsgi
from dotenv import load_dotenv
import logging
import os
import uuid

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _configure_logging(app):
    level = str(app.config['LOG_LEVEL']).upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger('chess_rules').setLevel(level)
    app.logger.setLevel(level)


def create_app(test_config=None):
    """Create and configure the Flask application."""
    load_dotenv()
    app = Flask(__name__)

    # Configure session
    app.config['SECRET_KEY'] = os.environ.get('CHESS_SESSION_SECRET', 'dev-secret-change-in-production')
    app.config['SESSION_TYPE'] = 'filesystem'
    app.config['SESSION_COOKIE_NAME'] = os.environ.get('CHESS_SESSION_COOKIE_NAME', 'chess_session')
    app.config['SESSION_FILE_DIR'] = os.environ.get(
        'CHESS_SESSION_DIR',
        os.path.join(os.getcwd(), 'flask_session')
    )
    app.config['LOG_LEVEL'] = os.environ.get('CHESS_LOG_LEVEL', 'INFO')
    app.config['AUTOSAVE'] = os.environ.get('CHESS_AUTOSAVE', 'false').lower() in {
        '1', 'true', 'yes', 'on'
    }
    # Sessions created by an earlier server process are treated as expired.
    app.config['SERVER_START_ID'] = uuid.uuid4().hex

    if test_config:
        app.config.update(test_config)

    _configure_logging(app)
    Session(app)

    # Register the API blueprint with Swagger documentation
    from .api import api_bp
    app.register_blueprint(api_bp)

    @app.after_request
    def disable_cache(response):
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, max-age=0'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    @app.route('/')
    def index():
        """Service description."""
        return jsonify({
            'name': 'chess-rules',
            'docs': '/api/docs',
            'state': '/api/game/state'
        })

    app.logger.info('Chess rules API ready (sessions in %s)', app.config['SESSION_FILE_DIR'])
    return app


def main():
    """Main entry point for running the application."""
    print("\n" + "="*60)
    print("Chess Rules API Starting...")
    print("="*60)
    print("\nAPI Documentation:    http://127.0.0.1:5000/api/docs")
    print("\nPress CTRL+C to stop the server\n")

    app = create_app()
    app.run(debug=True, host='127.0.0.1', port=5000)


def create_asgi_app():
    """Create ASGI-wrapped Flask application for deployment behind ASGI servers.

    Serve with ``uvicorn --factory chess_rules.app:create_asgi_app``.
    """
    flask_app = create_app()
    return WsgiToAsgi(flask_app)


# For development
if __name__ == '__main__':
    main()
