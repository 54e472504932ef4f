def test_index_and_health(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()
    res = client.get('/health')
    assert res.get_json() == {'status': 'ok', 'rooms': 0}


def test_unknown_room_state_is_404(client):
    res = client.get('/api/rooms/NOPE/state')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found'}


def test_room_state_tracks_socket_play(client, connect):
    alice, bob = connect(), connect()
    alice.emit('join_room', {'roomCode': 'ab12', 'playerName': 'Alice'}, namespace='/ws')

    state = client.get('/api/rooms/ab12/state').get_json()
    assert state['code'] == 'AB12'
    assert state['phase'] == 'lobby'
    assert state['players'][0]['name'] == 'Alice'
    assert state['players'][0]['isHost'] is True

    bob.emit('join_room', {'roomCode': 'AB12', 'playerName': 'Bob'}, namespace='/ws')
    assert client.get('/api/rooms/AB12/state').get_json()['phase'] == 'ready'

    alice.emit('start_game', namespace='/ws')
    bob.emit('score_update', True, namespace='/ws')
    state = client.get('/api/rooms/AB12/state').get_json()
    assert state['phase'] == 'in_progress'
    assert state['started'] is True
    assert state['gamesPlayed'] == 1
    assert state['totalRounds'] == 10
    rounds = {p['name']: p['round'] for p in state['players']}
    assert rounds == {'Alice': 1, 'Bob': 2}
    assert sorted(state['scores'].values()) == [0, 1]
    assert client.get('/health').get_json()['rooms'] == 1
