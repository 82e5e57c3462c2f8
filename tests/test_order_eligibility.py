import datetime as dt

from models import db, utcnow
from conftest import days_ago

URL = "/api/v1/account/order-eligibility"


def test_active_customer_may_order(client, make_customer, customer_headers):
    make_customer()
    resp = client.get(URL, headers=customer_headers())
    assert resp.status_code == 200
    assert resp.get_json()["data"]["can_place_orders"] is True


def test_suspended_customer_may_not_order(client, make_customer, customer_headers):
    customer = make_customer()
    headers = customer_headers()
    customer.status = "SUSPENDED"
    customer.status_reason = "Abuse"
    customer.suspension_until = utcnow() + dt.timedelta(days=2)
    db.session.commit()
    resp = client.get(URL, headers=headers)
    assert resp.status_code == 403
    body = resp.get_json()
    assert body["code"] == "SUSPENDED"
    assert body["message"] == "Your account is suspended. You cannot place orders."
    assert body["reason"] == "Abuse"
    assert body["suspension_until"]


def test_blocked_customer_may_not_order(client, make_customer, customer_headers):
    customer = make_customer()
    headers = customer_headers()
    customer.status = "BLOCKED"
    db.session.commit()
    resp = client.get(URL, headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "BLOCKED"


def test_expired_suspension_is_written_back(client, make_customer, customer_headers):
    customer = make_customer()
    headers = customer_headers()
    customer.status = "SUSPENDED"
    customer.suspension_until = utcnow() - dt.timedelta(minutes=1)
    db.session.commit()
    resp = client.get(URL, headers=headers)
    assert resp.status_code == 200
    db.session.refresh(customer)
    assert customer.status == "ACTIVE"
    assert customer.suspension_until is None


def test_inactive_customer_may_order(client, make_customer, customer_headers):
    customer = make_customer()
    headers = customer_headers()
    customer.last_login_at = days_ago(80)
    db.session.commit()
    resp = client.get(URL, headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["status"] == "INACTIVE"
    assert data["warning"]["message"] == "Your account is inactive"


def test_action_gate_does_not_greet_inactive_customer(client, make_customer, customer_headers):
    customer = make_customer()
    headers = customer_headers()
    customer.last_login_at = days_ago(80)
    db.session.commit()
    resp = client.get("/api/v1/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["warning"]["message"] == "Your account is inactive"
