"""Game state API endpoints."""

from flask import request
from flask_restx import Namespace, Resource, fields

from ..models import Player, array_to_position
from .session_state import get_game, new_game, parse_position, store_game, validate_session

ns = Namespace('game', description='Game state operations')

# API Models for documentation
piece_model = ns.model('Piece', {
    'type': fields.String(description='Piece type (pawn, rook, knight, bishop, queen, king)'),
    'color': fields.String(description='Piece color (white, black)'),
    'position': fields.List(fields.Integer, description='Position [row, col]'),
    'has_moved': fields.Boolean(description='Whether the piece has moved')
})

game_state_model = ns.model('GameState', {
    'game_id': fields.String(description='Unique game identifier'),
    'board': fields.Raw(description='Board snapshot: 8x8 grid, captured pieces, flags'),
    'current_turn': fields.String(description='Current player turn (white/black)'),
    'move_history': fields.List(fields.Raw, description='List of moves made'),
    'captured_pieces': fields.Raw(description='Captured pieces by color'),
    'in_check': fields.Boolean(description='Whether current player is in check'),
    'checkmate': fields.Boolean(description='Checkmate flag from the last move'),
    'game_over': fields.Boolean(description='Whether the game has ended'),
    'winner': fields.String(description='Winner color if game is over'),
    'resigned_by': fields.String(description='Side that resigned, if the game ended that way'),
    'status_message': fields.String(description='Current game status message'),
    'finished_at': fields.String(description='Timestamp when the game finished')
})

new_game_response = ns.model('NewGameResponse', {
    'success': fields.Boolean(description='Operation success status'),
    'message': fields.String(description='Response message'),
    'game_state': fields.Nested(game_state_model, description='New game state')
})

legal_moves_request = ns.model('LegalMovesRequest', {
    'position': fields.Raw(required=True,
                           description="Square of the piece: 'E2' or [row, col]")
})

legal_moves_response = ns.model('LegalMovesResponse', {
    'success': fields.Boolean(description='Operation success status'),
    'legal_moves': fields.List(fields.List(fields.Integer),
                               description='List of legal move positions [[row, col], ...]'),
    'squares': fields.List(fields.String, description="Same moves in notation, e.g. 'E4'")
})

board_text_response = ns.model('BoardText', {
    'board': fields.String(description='Text rendering of the board'),
    'current_turn': fields.String(description='Current player turn (white/black)')
})

resign_request = ns.model('ResignRequest', {
    'color': fields.String(required=True, description='Resigning side (white/black)')
})


@ns.route('/state')
class GameState(Resource):
    @ns.doc('get_game_state')
    @ns.marshal_with(game_state_model)
    @ns.response(200, 'Success')
    def get(self):
        """Get current game state."""
        return get_game().to_dict()


@ns.route('/new')
class NewGame(Resource):
    @ns.doc('start_new_game')
    @ns.marshal_with(new_game_response)
    @ns.response(200, 'New game started')
    def post(self):
        """Start a new game."""
        game = new_game()
        return {
            'success': True,
            'message': 'New game started',
            'game_state': game.to_dict()
        }


@ns.route('/board')
class BoardText(Resource):
    @ns.doc('get_board_text')
    @ns.marshal_with(board_text_response)
    def get(self):
        """Get the board as a text grid."""
        game = get_game()
        return {
            'board': game.board.display(),
            'current_turn': game.current_turn.value
        }


@ns.route('/legal-moves')
class LegalMoves(Resource):
    @ns.doc('get_legal_moves')
    @ns.expect(legal_moves_request)
    @ns.marshal_with(legal_moves_response)
    @ns.response(200, 'Success')
    @ns.response(400, 'Invalid request')
    def post(self):
        """Get legal moves for a piece at the given position."""
        data = request.get_json(silent=True)
        if not data:
            ns.abort(400, 'Invalid request payload')

        valid, error = validate_session()
        if not valid:
            ns.abort(400, error)

        position = parse_position(data.get('position'))
        if position is None:
            ns.abort(400, 'Invalid position')

        legal_moves = get_game().get_legal_moves(position)
        return {
            'success': True,
            'legal_moves': [list(move) for move in legal_moves],
            'squares': [array_to_position(move) for move in legal_moves]
        }


@ns.route('/resign')
class Resign(Resource):
    @ns.doc('resign_game')
    @ns.expect(resign_request)
    @ns.response(200, 'Resignation processed')
    @ns.response(400, 'Invalid request')
    def post(self):
        """Resign the current game."""
        data = request.get_json(silent=True) or {}
        try:
            player = Player(data.get('color', 'white'))
        except ValueError:
            ns.abort(400, 'Invalid color')

        valid, error = validate_session()
        if not valid:
            ns.abort(400, error)

        game = get_game()
        result = game.resign(player)
        store_game(game)
        return result
