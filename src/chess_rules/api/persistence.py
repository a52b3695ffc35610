"""Game persistence API endpoints (snapshots and stored games)."""

from flask import request
from flask_restx import Namespace, Resource, fields

from ..models import Board, Game
from ..replay import build_replay_states
from ..storage import StorageError, get_db_config, get_game as get_stored_game, list_games, save_game_state
from .session_state import get_game, store_game

ns = Namespace('persistence', description='Save and load game operations')

# API Models
load_game_request = ns.model('LoadGameRequest', {
    'game_state': fields.Raw(description='Game state object to load'),
    'board': fields.Raw(description='Bare board snapshot to start a game from')
})

load_game_response = ns.model('LoadGameResponse', {
    'success': fields.Boolean(description='Whether load was successful'),
    'message': fields.String(description='Result message'),
    'game_state': fields.Raw(description='Loaded game state')
})

export_response = ns.model('ExportResponse', {
    'success': fields.Boolean(description='Whether export was successful'),
    'game_state': fields.Raw(description='Full game state, loadable as-is'),
    'board': fields.String(description='Text rendering of the board')
})

save_response = ns.model('SaveResponse', {
    'success': fields.Boolean(description='Whether the game was stored'),
    'game_id': fields.String(description='Stored game id')
})

game_summary_model = ns.model('GameSummary', {
    'game_id': fields.String(description='Game id'),
    'current_turn': fields.String(description='Side to move'),
    'winner': fields.String(description='Winner color'),
    'status_message': fields.String(description='Last status message'),
    'game_over': fields.Boolean(description='Whether the game is finished'),
    'checkmate': fields.Boolean(description='Checkmate flag'),
    'finished_at': fields.String(description='Finished timestamp'),
    'moves_count': fields.Integer(description='Number of moves'),
})

saved_list_response = ns.model('SavedGamesResponse', {
    'games': fields.List(fields.Nested(game_summary_model))
})

saved_game_response = ns.model('SavedGameResponse', {
    'game': fields.Nested(game_summary_model),
    'game_state': fields.Raw(description='Stored game state'),
    'replay': fields.List(fields.Raw, description='Game states after each move')
})


def _require_storage():
    if get_db_config() is None:
        ns.abort(503, 'Database configuration missing')


@ns.route('/load')
class LoadGame(Resource):
    @ns.doc('load_game')
    @ns.expect(load_game_request)
    @ns.marshal_with(load_game_response)
    @ns.response(200, 'Game loaded')
    @ns.response(400, 'Invalid game state')
    def post(self):
        """Load a previously exported game state or board snapshot."""
        data = request.get_json(silent=True)
        if not data or ('game_state' not in data and 'board' not in data):
            ns.abort(400, 'Invalid load game payload')

        try:
            if 'game_state' in data:
                game = Game.from_dict(data['game_state'])
            else:
                game = Game(Board.from_dict(data['board']))
        except (KeyError, TypeError, ValueError, IndexError) as e:
            ns.abort(400, f'Failed to load game: {e}')

        store_game(game)
        return {
            'success': True,
            'message': 'Game loaded successfully',
            'game_state': game.to_dict()
        }


@ns.route('/export')
class ExportGame(Resource):
    @ns.doc('export_game')
    @ns.marshal_with(export_response)
    @ns.response(200, 'Game exported')
    def get(self):
        """Export the current game as a loadable snapshot."""
        game = get_game()
        return {
            'success': True,
            'game_state': game.to_dict(),
            'board': game.board.display()
        }


@ns.route('/save')
class SaveGame(Resource):
    @ns.doc('save_game')
    @ns.marshal_with(save_response)
    @ns.response(200, 'Game stored')
    @ns.response(503, 'Storage unavailable')
    def post(self):
        """Store the current game in the database."""
        _require_storage()
        game = get_game()
        try:
            saved = save_game_state(game.to_dict())
        except StorageError as e:
            ns.abort(500, f'Failed to save game: {e}')
        return {'success': True, 'game_id': saved['game_id']}


@ns.route('/saved')
class SavedGames(Resource):
    @ns.doc('list_saved_games')
    @ns.marshal_with(saved_list_response)
    @ns.response(200, 'Saved games listed')
    def get(self):
        """List stored games, most recent first."""
        _require_storage()
        limit_raw = request.args.get('limit', '50')
        try:
            limit = min(100, max(1, int(limit_raw)))
        except ValueError:
            limit = 50

        try:
            games = list_games(limit)
        except StorageError as e:
            ns.abort(500, f'Failed to list games: {e}')
        return {'games': games}


@ns.route('/saved/<string:game_id>')
class SavedGame(Resource):
    @ns.doc('get_saved_game')
    @ns.marshal_with(saved_game_response)
    @ns.response(200, 'Saved game found')
    @ns.response(404, 'Unknown game')
    def get(self, game_id):
        """Fetch a stored game with its move-by-move replay."""
        _require_storage()
        try:
            record = get_stored_game(game_id)
        except StorageError as e:
            ns.abort(500, f'Failed to load game: {e}')
        if not record:
            ns.abort(404, 'Game not found')

        game_state = record.get('game_state') or {}
        replay = build_replay_states(
            game_state.get('move_history') or [],
            game_state.get('start_position')
        )
        return {'game': record, 'game_state': game_state, 'replay': replay}


@ns.route('/saved/<string:game_id>/resume')
class ResumeGame(Resource):
    @ns.doc('resume_saved_game')
    @ns.marshal_with(load_game_response)
    @ns.response(200, 'Game resumed')
    @ns.response(404, 'Unknown game')
    def post(self, game_id):
        """Make a stored game the current session game."""
        _require_storage()
        try:
            record = get_stored_game(game_id)
        except StorageError as e:
            ns.abort(500, f'Failed to load game: {e}')
        if not record:
            ns.abort(404, 'Game not found')

        try:
            game = Game.from_dict(record.get('game_state') or {})
        except (KeyError, TypeError, ValueError, IndexError) as e:
            ns.abort(400, f'Failed to load game: {e}')

        store_game(game)
        return {
            'success': True,
            'message': 'Game resumed',
            'game_state': game.to_dict()
        }
