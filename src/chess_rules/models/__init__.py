"""Chess game models."""

from .notation import Square, array_to_position, position_to_array
from .pieces import Piece, PieceType, Player, generate_moves
from .board import Board
from .game import Game

__all__ = [
    'Square', 'array_to_position', 'position_to_array',
    'Piece', 'PieceType', 'Player', 'generate_moves',
    'Board', 'Game'
]
