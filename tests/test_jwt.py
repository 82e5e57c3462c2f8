import datetime as dt

import jwt
import pytest

from app.utils.jwt import (
    ADMIN,
    CUSTOMER,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
)


def test_access_token_claims(app):
    claims = decode_token(create_access_token(5, ADMIN, "SUB_ADMIN"), expected_kind=ADMIN)
    assert claims["sub"] == "5"
    assert claims["kind"] == ADMIN
    assert claims["role"] == "SUB_ADMIN"
    assert claims["type"] == "access"


def test_customer_token_has_no_role(app):
    claims = decode_token(create_access_token(9, CUSTOMER))
    assert "role" not in claims


def test_refresh_token_type_is_checked(app):
    token = create_refresh_token(1, CUSTOMER)
    with pytest.raises(TokenError):
        decode_token(token)
    assert decode_token(token, expected_type="refresh")["kind"] == CUSTOMER


def test_kind_mismatch(app):
    with pytest.raises(TokenError):
        decode_token(create_access_token(1, CUSTOMER), expected_kind=ADMIN)


def test_expired_token(app):
    token = jwt.encode(
        {"sub": "1", "kind": CUSTOMER, "type": "access",
         "exp": dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=5)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    with pytest.raises(TokenError, match="expired"):
        decode_token(token)


def test_wrong_signature(app):
    token = jwt.encode({"sub": "1", "kind": CUSTOMER, "type": "access"}, "another-secret-of-adequate-length", algorithm="HS256")
    with pytest.raises(TokenError, match="invalid"):
        decode_token(token)
