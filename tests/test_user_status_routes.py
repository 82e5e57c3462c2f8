import datetime as dt

import pytest

from models import db, utcnow, CustomerAccount
from conftest import OWNER_EMAIL, days_ago


@pytest.fixture
def staff_headers(owner, make_admin, admin_headers):
    make_admin()
    return admin_headers("staff@storefront.test")


def test_sub_admin_blocks_customer(client, make_customer, staff_headers):
    customer = make_customer()
    resp = client.put(f"/api/v1/users/{customer.id}/block", json={"reason": "Chargebacks"}, headers=staff_headers)
    assert resp.status_code == 200
    user = resp.get_json()["data"]["user"]
    assert user["status"] == "BLOCKED"
    assert user["status_reason"] == "Chargebacks"
    assert user["status_changed_by"] == "staff@storefront.test"


def test_block_requires_reason(client, make_customer, staff_headers):
    customer = make_customer()
    resp = client.put(f"/api/v1/users/{customer.id}/block", json={}, headers=staff_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide a reason for blocking"
    assert db.session.get(CustomerAccount, customer.id).status == "ACTIVE"


def test_suspend_with_days(client, make_customer, staff_headers):
    customer = make_customer()
    resp = client.put(
        f"/api/v1/users/{customer.id}/suspend",
        json={"reason": "Abuse", "days": 3},
        headers=staff_headers,
    )
    assert resp.status_code == 200
    user = resp.get_json()["data"]["user"]
    assert user["status"] == "SUSPENDED"
    until = dt.datetime.fromisoformat(user["suspension_until"])
    assert dt.timedelta(days=2, hours=23) < until - utcnow() <= dt.timedelta(days=3)


def test_suspend_rejects_non_positive_days(client, make_customer, staff_headers):
    customer = make_customer()
    resp = client.put(
        f"/api/v1/users/{customer.id}/suspend",
        json={"reason": "Abuse", "days": 0},
        headers=staff_headers,
    )
    assert resp.status_code == 400


def test_unblock_and_activate(client, make_customer, staff_headers):
    customer = make_customer(status="BLOCKED", status_reason="x", login_attempts=5)
    resp = client.put(f"/api/v1/users/{customer.id}/unblock", headers=staff_headers)
    assert resp.get_json()["data"]["user"]["status"] == "ACTIVE"

    customer = db.session.get(CustomerAccount, customer.id)
    customer.status = "SUSPENDED"
    customer.suspension_until = utcnow() + dt.timedelta(days=5)
    db.session.commit()
    resp = client.put(f"/api/v1/users/{customer.id}/activate", headers=staff_headers)
    user = resp.get_json()["data"]["user"]
    assert user["status"] == "ACTIVE"
    assert user["suspension_until"] is None
    assert db.session.get(CustomerAccount, customer.id).login_attempts == 0


def test_unknown_customer_is_404(client, staff_headers):
    resp = client.put("/api/v1/users/424242/unblock", headers=staff_headers)
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "User not found"


def test_status_shows_stored_and_resolved(client, make_customer, staff_headers):
    customer = make_customer(last_login_at=days_ago(65))
    resp = client.get(f"/api/v1/users/{customer.id}/status", headers=staff_headers)
    user = resp.get_json()["data"]["user"]
    assert user["stored_status"] == "ACTIVE"
    assert user["resolved_status"] == "INACTIVE"


def test_customer_token_cannot_manage_users(client, make_customer, customer_headers):
    customer = make_customer()
    resp = client.put(f"/api/v1/users/{customer.id}/block", json={"reason": "x"}, headers=customer_headers())
    assert resp.status_code == 401


def test_disabled_admin_token_stops_working(client, make_customer, owner, make_admin, admin_headers):
    staff = make_admin()
    headers = admin_headers("staff@storefront.test")
    staff.status = "Disabled"
    db.session.commit()
    customer = make_customer()
    resp = client.get(f"/api/v1/users/{customer.id}/status", headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Your admin account has been disabled"


def test_owner_can_manage_users(client, make_customer, owner, admin_headers):
    customer = make_customer()
    resp = client.put(
        f"/api/v1/users/{customer.id}/block",
        json={"reason": "Fraud"},
        headers=admin_headers(OWNER_EMAIL),
    )
    assert resp.status_code == 200


@pytest.mark.parametrize("days", [True, "7", 2.0])
def test_suspend_rejects_non_integer_days(client, make_customer, staff_headers, days):
    customer = make_customer()
    resp = client.put(
        f"/api/v1/users/{customer.id}/suspend",
        json={"reason": "Abuse", "days": days},
        headers=staff_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"
    assert db.session.get(CustomerAccount, customer.id).status == "ACTIVE"
