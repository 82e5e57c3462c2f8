def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'


def test_metrics_endpoint_exposes_login_counters(client):
    client.post('/api/v1/auth/login', json={'email': 'ghost@example.com', 'password': 'x'})
    resp = client.get('/metrics')
    assert resp.status_code == 200
    assert 'login_attempts_total' in resp.get_data(as_text=True)
