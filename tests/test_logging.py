import json
import logging

from app.logging import JsonFormatter, MaskingFilter


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_generated_request_id(client):
    resp = client.get("/__ok")
    assert len(resp.headers["X-Request-ID"]) == 32


def test_sensitive_fields_masked_in_info(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "testing")
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    logger.info({"email": "user@example.com", "password": "hunter22", "customer_id": 7})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["password"] == "[REDACTED]"
    assert record.msg["customer_id"] == 7


def test_sensitive_fields_visible_in_debug(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_json_formatter_merges_dict_messages():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, {"event": "admin_login", "admin_id": 3}, None, None)
    record.request_id = "rid"
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "admin_login"
    assert out["admin_id"] == 3
    assert out["request_id"] == "rid"
    assert "message" not in out


def test_lockout_is_logged(client, make_customer, caplog):
    make_customer(login_attempts=4)
    caplog.set_level("INFO")
    client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "wrong"})
    events = [r.msg.get("event") for r in caplog.records if isinstance(r.msg, dict)]
    assert "account_lockout" in events
    assert "account_status_transition" in events


def test_nested_credentials_are_masked(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1,
                               {"event": "e", "payload": {"Password": "p", "name": "n"}}, None, None)
    MaskingFilter().filter(record)
    assert record.msg["payload"] == {"Password": "[REDACTED]", "name": "n"}


def test_principal_id_attached_inside_request(app):
    from flask import g
    from app.logging import PrincipalFilter
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    with app.test_request_context("/"):
        g.principal_id = 42
        PrincipalFilter().filter(record)
    assert record.principal_id == "42"
