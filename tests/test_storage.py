"""Tests for the Postgres storage helpers, run against a fake connection."""

from datetime import datetime, timezone

import psycopg
import pytest

from chess_rules import storage
from chess_rules.models import Game


class FakeCursor:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        if self.error:
            raise self.error
        self.executed.append((query, params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return self._cursor


@pytest.fixture
def db(monkeypatch):
    monkeypatch.setenv('DATABASE_URL', 'postgresql://chess@localhost/chess')
    monkeypatch.delenv('CHESS_GAMES_TABLE', raising=False)

    def _install(cursor):
        monkeypatch.setattr(storage, '_connect', lambda config: FakeConnection(cursor))
        return cursor

    return _install


def test_config_from_environment(monkeypatch) -> None:
    monkeypatch.delenv('DATABASE_URL', raising=False)
    assert storage.get_db_config() is None

    monkeypatch.setenv('DATABASE_URL', 'postgresql://x')
    monkeypatch.setenv('CHESS_GAMES_TABLE', 'archive')
    assert storage.get_db_config() == storage.DbConfig('postgresql://x', 'archive')


def test_missing_configuration(monkeypatch) -> None:
    monkeypatch.delenv('DATABASE_URL', raising=False)
    with pytest.raises(storage.StorageError, match='configuration missing'):
        storage.list_games()


def test_save_game_state(db) -> None:
    game = Game()
    game.make_move((6, 4), (4, 4))
    cursor = db(FakeCursor(rows=[{'game_id': game.game_id}]))

    assert storage.save_game_state(game.to_dict()) == {'game_id': game.game_id}

    _, params = cursor.executed[0]
    assert params['game_id'] == game.game_id
    assert params['current_turn'] == 'black'
    assert params['moves_count'] == 1
    assert params['game_state'].obj['move_history'][0]['notation'] == 'Pawn: E2 to E4'


def test_save_requires_game_id(db) -> None:
    db(FakeCursor())
    with pytest.raises(storage.StorageError, match='Game id missing'):
        storage.save_game_state({'board': {}})


def test_save_denied(db) -> None:
    db(FakeCursor(rows=[]))
    with pytest.raises(storage.StorageError, match='denied'):
        storage.save_game_state(Game().to_dict())


def test_driver_errors_are_wrapped(db) -> None:
    db(FakeCursor(error=psycopg.OperationalError('connection lost')))
    with pytest.raises(storage.StorageError, match='connection lost'):
        storage.get_game('abc')


def test_list_games_serializes_timestamps(db) -> None:
    finished = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    cursor = db(FakeCursor(rows=[{'game_id': 'abc', 'finished_at': finished, 'moves_count': 4}]))

    games = storage.list_games(limit=5)

    assert games == [{'game_id': 'abc', 'finished_at': finished.isoformat(), 'moves_count': 4}]
    assert cursor.executed[0][1] == (5,)


def test_get_unknown_game(db) -> None:
    db(FakeCursor(rows=[]))
    assert storage.get_game('missing') is None
