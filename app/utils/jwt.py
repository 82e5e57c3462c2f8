import datetime as dt
from typing import Dict, Optional
import jwt
from flask import current_app

CUSTOMER = "customer"
ADMIN = "admin"


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def _utcnow():
    return dt.datetime.now(dt.timezone.utc)


def _exp(minutes: int = None, days: int = None):
    now = _utcnow()
    if minutes:
        return now + dt.timedelta(minutes=minutes)
    if days:
        return now + dt.timedelta(days=days)
    raise ValueError("must supply minutes or days")


def create_access_token(principal_id, kind: str, role: Optional[str] = None) -> str:
    cfg = current_app.config
    payload: Dict = {
        "sub": str(principal_id),
        "kind": kind,
        "type": "access",
        "exp": _exp(minutes=cfg["ACCESS_TOKEN_LIFETIME_MIN"]),
    }
    if role:
        payload["role"] = role
    return jwt.encode(payload, _secret(), algorithm="HS256")


def create_refresh_token(principal_id, kind: str) -> str:
    cfg = current_app.config
    payload = {
        "sub": str(principal_id),
        "kind": kind,
        "type": "refresh",
        "exp": _exp(days=cfg["REFRESH_TOKEN_LIFETIME_DAYS"]),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


class TokenError(Exception):
    pass


def decode_token(token: str, expected_type: str = "access", expected_kind: Optional[str] = None) -> Dict:
    try:
        data = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if data.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    if expected_kind and data.get("kind") != expected_kind:
        raise TokenError(f"expected {expected_kind} token")
    if not data.get("sub"):
        raise TokenError("invalid token")
    return data
