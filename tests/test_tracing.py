def test_traceparent_header(client):
    resp = client.get("/__ok")
    assert resp.status_code == 200
    assert "traceparent" in resp.headers


def test_request_spans_are_recorded(app, client):
    app.span_exporter.clear()
    client.get("/health")
    assert any(span.name for span in app.span_exporter.get_finished_spans())
