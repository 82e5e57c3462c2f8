def test_404_json_envelope(client):
    resp = client.get('/no/such/route')
    assert resp.status_code == 404
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 404
    assert isinstance(data.get('message'), str)


def test_unexpected_500_json_envelope(client):
    resp = client.get('/__boom')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 500
    assert 'RuntimeError' not in data['message']


def test_ok_helper_endpoint(client):
    resp = client.get('/__ok')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data == {
        'status': 'success',
        'message': 'success',
        'data': {'ping': 'pong'}
    }


def test_service_error_envelope(client):
    resp = client.post('/api/v1/auth/login', json={'email': 'ghost@example.com', 'password': 'x'})
    assert resp.status_code == 401
    assert resp.get_json() == {
        'status': 'error',
        'message': 'Invalid credentials',
        'code': 'INVALID_CREDENTIALS',
    }


def test_security_headers(client):
    resp = client.get('/health')
    assert resp.headers['X-Content-Type-Options'] == 'nosniff'
    assert resp.headers['X-Frame-Options'] == 'DENY'
    assert 'X-Request-ID' in resp.headers['Access-Control-Expose-Headers']
