"""Helpers shared by the API namespaces: session game and input parsing."""

import logging
import threading
from typing import Optional, Tuple

from flask import session, current_app

from ..models import Game, Square, position_to_array
from ..models.notation import is_on_board
from ..storage import StorageError, get_db_config, save_game_state

logger = logging.getLogger(__name__)


def parse_position(value) -> Optional[Square]:
    """
    Parse a square sent by a client.

    Accepts algebraic names ('E2'), [row, col] pairs and 'row,col' strings.

    Returns:
        (row, col) tuple, or None if the value is not a square on the board
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)) and len(value) == 2:
        try:
            square = (int(value[0]), int(value[1]))
        except (TypeError, ValueError):
            return None
    elif isinstance(value, str) and ',' in value:
        parts = [p.strip() for p in value.split(',')]
        if len(parts) != 2:
            return None
        try:
            square = (int(parts[0]), int(parts[1]))
        except ValueError:
            return None
    elif isinstance(value, str):
        try:
            return position_to_array(value.strip())
        except ValueError:
            return None
    else:
        return None

    return square if is_on_board(*square) else None


def new_game() -> Game:
    """Replace the session game with a fresh one."""
    session.clear()
    session['server_start_id'] = current_app.config['SERVER_START_ID']
    game = Game()
    store_game(game)
    return game


def get_game() -> Game:
    """Get current game from session or create new one."""
    if session.get('server_start_id') != current_app.config['SERVER_START_ID']:
        return new_game()
    if 'game' not in session:
        game = Game()
        store_game(game)
        return game
    return Game.from_dict(session['game'])


def validate_session() -> Tuple[bool, Optional[str]]:
    """Validate the session is active."""
    if 'game' not in session:
        return False, 'No active game'
    if session.get('server_start_id') != current_app.config['SERVER_START_ID']:
        return False, 'Session expired'
    return True, None


def store_game(game: Game) -> None:
    """Write the game back to the session."""
    session['game'] = game.to_dict()
    session['server_start_id'] = current_app.config['SERVER_START_ID']
    session.modified = True


def persist_in_background(game: Game) -> None:
    """Save the game to the database without blocking the request."""
    if not current_app.config.get('AUTOSAVE') or get_db_config() is None:
        return

    def _persist(state_snapshot):
        try:
            save_game_state(state_snapshot)
        except StorageError as exc:
            logger.warning('Database save failed: %s', exc)

    threading.Thread(
        target=_persist,
        args=(game.to_dict(),),
        daemon=True
    ).start()
