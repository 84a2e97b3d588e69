def test_index_reports_active_rooms(client, registry):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['active_rooms'] == 0
    registry.create()
    assert client.get('/').get_json()['active_rooms'] == 1


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_data(as_text=True) == 'OK'


def test_keep_alive(client):
    res = client.get('/keep-alive')
    assert res.status_code == 200
    assert res.get_data(as_text=True) == 'OK'
