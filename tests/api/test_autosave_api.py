"""API tests for storing accepted moves in the background."""

import logging
from types import SimpleNamespace

import pytest

from chess_rules.api import session_state
from chess_rules.app import create_app
from chess_rules.storage import DbConfig, StorageError


class InlineThread:
    """Runs the target on ``start()`` so the save happens before the response."""

    started = []

    def __init__(self, target, args=(), daemon=None):
        self._target = target
        self._args = args
        self.daemon = daemon

    def start(self):
        InlineThread.started.append(self)
        self._target(*self._args)


@pytest.fixture
def autosave_client(tmp_path, monkeypatch):
    InlineThread.started = []
    monkeypatch.setattr(session_state, 'threading', SimpleNamespace(Thread=InlineThread))
    monkeypatch.setattr(session_state, 'get_db_config', lambda: DbConfig('postgresql://test'))
    app = create_app({
        'TESTING': True,
        'SESSION_FILE_DIR': str(tmp_path / 'sessions'),
        'AUTOSAVE': True,
    })
    client = app.test_client()
    client.post('/api/game/new')
    return client


def _move(client, from_square, to_square):
    return client.post('/api/moves/', json={'from': from_square, 'to': to_square})


def test_accepted_move_is_stored(autosave_client, monkeypatch) -> None:
    saved = []
    monkeypatch.setattr(session_state, 'save_game_state', saved.append)

    response = _move(autosave_client, 'E2', 'E4')

    assert response.status_code == 200
    assert len(saved) == 1
    assert saved[0]['move_history'][0]['notation'] == 'Pawn: E2 to E4'
    assert saved[0]['current_turn'] == 'black'
    assert InlineThread.started[0].daemon


def test_rejected_move_is_not_stored(autosave_client, monkeypatch) -> None:
    saved = []
    monkeypatch.setattr(session_state, 'save_game_state', saved.append)

    data = _move(autosave_client, 'E2', 'E5').get_json()

    assert not data['success']
    assert saved == []


def test_undo_is_stored(autosave_client, monkeypatch) -> None:
    saved = []
    monkeypatch.setattr(session_state, 'save_game_state', saved.append)

    _move(autosave_client, 'E2', 'E4')
    autosave_client.post('/api/moves/undo')

    assert [len(state['move_history']) for state in saved] == [1, 0]


def test_storage_failure_is_logged(autosave_client, monkeypatch, caplog) -> None:
    def _fail(state):
        raise StorageError('connection refused')

    monkeypatch.setattr(session_state, 'save_game_state', _fail)

    with caplog.at_level(logging.WARNING, logger='chess_rules.api.session_state'):
        response = _move(autosave_client, 'E2', 'E4')

    assert response.status_code == 200
    assert response.get_json()['success']
    assert 'Database save failed: connection refused' in caplog.text


def test_skipped_without_database(autosave_client, monkeypatch) -> None:
    saved = []
    monkeypatch.setattr(session_state, 'get_db_config', lambda: None)
    monkeypatch.setattr(session_state, 'save_game_state', saved.append)

    assert _move(autosave_client, 'E2', 'E4').get_json()['success']
    assert saved == []
    assert InlineThread.started == []


def test_skipped_when_disabled(client, monkeypatch) -> None:
    saved = []
    monkeypatch.setattr(session_state, 'get_db_config', lambda: DbConfig('postgresql://test'))
    monkeypatch.setattr(session_state, 'save_game_state', saved.append)
    client.post('/api/game/new')

    assert client.post('/api/moves/', json={'from': 'E2', 'to': 'E4'}).get_json()['success']
    assert saved == []
