"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chess_rules.app import create_app
from chess_rules.models import Board, Game, PieceType, Player, position_to_array


@pytest.fixture
def fools_mate():
    """1. f3 e5 2. g4 Qh4#"""
    return [('F2', 'F3'), ('E7', 'E5'), ('G2', 'G4'), ('D8', 'H4')]


@pytest.fixture
def build_board():
    """Return a factory placing ``(square, piece_type, owner)`` entries on an empty board."""

    def _build(pieces, current_player: Player = Player.WHITE) -> Board:
        board = Board.empty()
        for name, piece_type, owner in pieces:
            row, col = position_to_array(name)
            board.place_piece(piece_type, owner, row, col)
        board.current_player = current_player
        return board

    return _build


@pytest.fixture
def pinned_rook_board(build_board) -> Board:
    """White rook on E2 pinned to the king on E1 by a black rook on E8."""
    return build_board([
        ('E1', PieceType.KING, Player.WHITE),
        ('E2', PieceType.ROOK, Player.WHITE),
        ('E8', PieceType.ROOK, Player.BLACK),
        ('A8', PieceType.KING, Player.BLACK),
    ])


@pytest.fixture
def play():
    """Play algebraic moves through a Game and return it."""

    def _play(moves, game: Game | None = None) -> Game:
        game = game or Game()
        for from_name, to_name in moves:
            result = game.make_move(position_to_array(from_name), position_to_array(to_name))
            assert result['success'], f'{from_name}-{to_name}: {result["message"]}'
        return game

    return _play


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.delenv('DATABASE_URL', raising=False)
    return create_app({
        'TESTING': True,
        'SESSION_FILE_DIR': str(tmp_path / 'sessions'),
        'AUTOSAVE': False,
    })


@pytest.fixture
def client(app):
    return app.test_client()
