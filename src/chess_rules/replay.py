"""Replay helpers for reviewing recorded games."""

from typing import List, Dict, Any, Optional

from .models import Board, Game


def build_replay_states(move_history: List[Dict[str, Any]],
                        start_position: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Return a list of game states from the start position through each move."""
    board = Board.from_dict(start_position) if start_position else Board()
    game = Game(board)
    states = [game.to_dict()]

    for move in move_history:
        from_pos = tuple(move.get('from', (0, 0)))
        to_pos = tuple(move.get('to', (0, 0)))
        result = game.make_move(from_pos, to_pos)
        if not result['success']:
            break
        states.append(game.to_dict())

    return states
