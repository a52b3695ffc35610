"""API tests for game state and move endpoints."""


def _start(client):
    response = client.post('/api/game/new')
    assert response.status_code == 200
    return response.get_json()


def _move(client, from_square, to_square):
    return client.post('/api/moves/', json={'from': from_square, 'to': to_square})


def test_index(client) -> None:
    data = client.get('/').get_json()
    assert data['name'] == 'chess-rules'
    assert data['docs'] == '/api/docs'


def test_state_creates_game(client) -> None:
    response = client.get('/api/game/state')
    assert response.status_code == 200
    assert response.headers['Cache-Control'].startswith('no-store')
    state = response.get_json()
    assert state['current_turn'] == 'white'
    assert len(state['board']['board']) == 8
    assert state['move_history'] == []


def test_new_game(client) -> None:
    data = _start(client)
    assert data['success']
    assert data['game_state']['status_message'] == "White's turn"


def test_move_without_game(client) -> None:
    response = _move(client, 'E2', 'E4')
    assert response.status_code == 400
    assert response.get_json()['message'] == 'No active game'


def test_make_move(client) -> None:
    _start(client)
    response = _move(client, 'E2', 'E4')
    data = response.get_json()

    assert response.status_code == 200
    assert data['success']
    assert data['game_state']['current_turn'] == 'black'
    assert client.get('/api/game/state').get_json()['current_turn'] == 'black'


def test_move_formats(client) -> None:
    _start(client)
    assert _move(client, [6, 4], '4,4').get_json()['success']
    assert _move(client, 'e7', 'e5').get_json()['success']


def test_bad_move_requests(client) -> None:
    _start(client)
    assert _move(client, 'Z9', 'E4').status_code == 400
    assert _move(client, [9, 9], 'E4').get_json()['message'] == 'Invalid move format'
    response = client.post('/api/moves/', json={})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid move payload'


def test_illegal_move(client) -> None:
    _start(client)
    data = _move(client, 'E2', 'E5').get_json()
    assert not data['success']
    assert data['message'] == 'Illegal move'
    assert data['game_state']['current_turn'] == 'white'


def test_wrong_turn(client) -> None:
    _start(client)
    data = _move(client, 'E7', 'E5').get_json()
    assert data['message'] == "It's white's turn"


def test_checkmate_over_http(client, fools_mate) -> None:
    _start(client)
    for from_square, to_square in fools_mate:
        data = _move(client, from_square, to_square).get_json()
        assert data['success']
    assert data['checkmate']
    assert data['game_over']
    assert data['winner'] == 'black'


def test_legal_moves(client) -> None:
    _start(client)
    response = client.post('/api/game/legal-moves', json={'position': 'B1'})
    data = response.get_json()
    assert sorted(data['squares']) == ['A3', 'C3']
    assert sorted(data['legal_moves']) == [[5, 0], [5, 2]]


def test_legal_moves_bad_position(client) -> None:
    _start(client)
    response = client.post('/api/game/legal-moves', json={'position': 'K9'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid position'


def test_undo(client) -> None:
    _start(client)
    _move(client, 'E2', 'E4')

    data = client.post('/api/moves/undo').get_json()
    assert data['success']
    assert data['game_state']['current_turn'] == 'white'
    assert data['game_state']['move_history'] == []

    data = client.post('/api/moves/undo').get_json()
    assert not data['success']
    assert data['message'] == 'No moves to undo'


def test_board_text(client) -> None:
    _start(client)
    data = client.get('/api/game/board').get_json()
    lines = data['board'].split('\n')
    assert lines[1] == '8 bR bN bB bQ bK bB bN bR  8'
    assert data['current_turn'] == 'white'


def test_resign(client) -> None:
    _start(client)
    data = client.post('/api/game/resign', json={'color': 'black'}).get_json()
    assert data['winner'] == 'white'
    assert client.get('/api/game/state').get_json()['game_over']

    response = client.post('/api/game/resign', json={'color': 'green'})
    assert response.status_code == 400
