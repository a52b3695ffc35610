"""Tests for whole-board save/load."""

import json

import pytest

from chess_rules.gameio import GameIOError, load_game, save_game
from chess_rules.models import Board, Player


def test_save_and_load(tmp_path) -> None:
    board = Board()
    board.move_piece_position(6, 4, 4, 4)
    board.switch_player()
    board.move_piece_position(1, 3, 3, 3)
    board.switch_player()
    board.move_piece_position(4, 4, 3, 3)
    path = tmp_path / 'game.json'

    save_game(board, path)
    loaded = load_game(path)

    assert loaded.to_dict() == board.to_dict()
    assert loaded.current_player is Player.WHITE
    assert [p.symbol for p in loaded.captured_black] == ['bP']
    assert loaded.get_piece(3, 3).has_moved


def test_save_overwrites(tmp_path) -> None:
    path = tmp_path / 'game.json'
    path.write_text('stale', encoding='utf-8')
    save_game(Board(), path)
    assert json.loads(path.read_text(encoding='utf-8'))['current_player'] == 'white'


def test_missing_file(tmp_path) -> None:
    with pytest.raises(GameIOError):
        load_game(tmp_path / 'nope.json')


def test_unwritable_destination(tmp_path) -> None:
    with pytest.raises(GameIOError):
        save_game(Board(), tmp_path / 'missing-dir' / 'game.json')


@pytest.mark.parametrize('content', [
    'not json',
    '{}',
    '{"board": [[{"type": "dragon", "color": "white"}]]}',
])
def test_invalid_content(tmp_path, content) -> None:
    path = tmp_path / 'game.json'
    path.write_text(content, encoding='utf-8')
    with pytest.raises(GameIOError):
        load_game(path)
