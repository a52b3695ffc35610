"""Move-related API endpoints."""

from flask import request
from flask_restx import Namespace, Resource, fields

from .session_state import (
    get_game,
    parse_position,
    persist_in_background,
    store_game,
    validate_session,
)

ns = Namespace('moves', description='Move operations')

# API Models
move_request = ns.model('MoveRequest', {
    'from': fields.Raw(required=True,
                       description="Starting square: 'E2' or [row, col]"),
    'to': fields.Raw(required=True,
                     description="Target square: 'E4' or [row, col]")
})

move_response = ns.model('MoveResponse', {
    'success': fields.Boolean(description='Whether the move was successful'),
    'message': fields.String(description='Result message'),
    'in_check': fields.Boolean(description='Whether opponent is now in check'),
    'checkmate': fields.Boolean(description='Whether the move delivered checkmate'),
    'game_over': fields.Boolean(description='Whether the game has ended'),
    'winner': fields.String(description='Winner if game is over'),
    'captured': fields.Boolean(description='Whether a piece was captured'),
    'game_state': fields.Raw(description='Updated game state')
})

undo_response = ns.model('UndoResponse', {
    'success': fields.Boolean(description='Whether undo was successful'),
    'message': fields.String(description='Result message'),
    'in_check': fields.Boolean(description='Whether current player is in check'),
    'game_state': fields.Raw(description='Updated game state')
})


@ns.route('/')
class MakeMove(Resource):
    @ns.doc('make_move')
    @ns.expect(move_request)
    @ns.marshal_with(move_response)
    @ns.response(200, 'Move processed')
    @ns.response(400, 'Invalid move')
    def post(self):
        """Make a chess move."""
        data = request.get_json(silent=True)
        if not data:
            ns.abort(400, 'Invalid move payload')

        valid, error = validate_session()
        if not valid:
            ns.abort(400, error)

        from_pos = parse_position(data.get('from'))
        to_pos = parse_position(data.get('to'))
        if not from_pos or not to_pos:
            ns.abort(400, 'Invalid move format')

        game = get_game()
        result = game.make_move(from_pos, to_pos)
        store_game(game)

        if result['success']:
            persist_in_background(game)

        result['game_state'] = game.to_dict()
        return result


@ns.route('/undo')
class UndoMove(Resource):
    @ns.doc('undo_move')
    @ns.marshal_with(undo_response)
    @ns.response(200, 'Move undone')
    @ns.response(400, 'Cannot undo')
    def post(self):
        """Undo the last move."""
        valid, error = validate_session()
        if not valid:
            ns.abort(400, error)

        game = get_game()
        result = game.undo_move()
        store_game(game)

        if result['success']:
            result['game_state'] = game.to_dict()
            persist_in_background(game)

        return result
