import os
import sys
import datetime as dt
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db, utcnow, CustomerAccount, AdminAccount

OWNER_EMAIL = "owner@storefront.test"
PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app_instance():
    # one app per session: prometheus collectors and the tracer provider are global
    os.environ.setdefault('APP_ENV', 'testing')
    from app import create_app
    from app.config import TestingConfig
    return create_app(TestingConfig)


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def now():
    return utcnow()


@pytest.fixture
def make_customer(app):
    from app.utils.passwords import hash_password

    def _make(email="jane@example.com", password=PASSWORD, **fields):
        now = utcnow()
        values = dict(
            name="Jane",
            email=email,
            phone="+15550001111",
            password_hash=hash_password(password),
            status="ACTIVE",
            status_changed_at=now,
            last_login_at=now,
            login_attempts=0,
        )
        values.update(fields)
        customer = CustomerAccount(**values)
        db.session.add(customer)
        db.session.commit()
        return customer

    return _make


@pytest.fixture
def make_admin(app):
    from app.utils.passwords import hash_password

    def _make(email="staff@storefront.test", password=PASSWORD, **fields):
        values = dict(
            name=email.split("@")[0],
            email=email,
            password_hash=hash_password(password),
            role="SUB_ADMIN",
            status="Active",
        )
        values.update(fields)
        admin = AdminAccount(**values)
        db.session.add(admin)
        db.session.commit()
        return admin

    return _make


@pytest.fixture
def owner(make_admin):
    return make_admin(email=OWNER_EMAIL, name="Owner", role="MAIN_ADMIN")


def days_ago(days, now=None):
    return (now or utcnow()) - dt.timedelta(days=days)


def login(client, path, email, password=PASSWORD):
    return client.post(f"/api/v1/auth/{path}", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    def _headers(email):
        resp = login(client, "admin/login", email)
        assert resp.status_code == 200, resp.get_json()
        return bearer(resp.get_json()["data"]["token"])

    return _headers


@pytest.fixture
def customer_headers(client):
    def _headers(email="jane@example.com"):
        resp = login(client, "login", email)
        assert resp.status_code == 200, resp.get_json()
        return bearer(resp.get_json()["data"]["token"])

    return _headers
