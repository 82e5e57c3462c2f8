"""
Credential checks and token issuance for customers and admins.

This is the only place both resolvers run during a login. Admin tokens carry
the role resolved at issuance; it stays pinned for the lifetime of the token.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from flask import current_app

from models import db
from models.admin import AdminAccount
from models.customer import CustomerAccount
from app.auth.roles import Role, normalize_email, resolve_role
from app.auth.status import AccountStatus, ResolvedStatus, resolve_status
from app.metrics import LOGIN_ATTEMPTS
from app.services import lifecycle
from app.services.admin_governor import refresh_role
from app.services.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateError,
    ValidationError,
)
from app.utils.db import transactional
from app.utils.jwt import (
    ADMIN,
    CUSTOMER,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from app.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass
class CustomerSession:
    customer: CustomerAccount
    resolved: ResolvedStatus
    token: str
    refresh_token: str
    warning: Optional[dict] = None
    info: Optional[dict] = None


@dataclass
class AdminSession:
    admin: AdminAccount
    role: Role
    token: str
    refresh_token: str
    claims: dict = field(default_factory=dict)


def owner_email() -> str:
    return current_app.config["OWNER_ADMIN_EMAIL"]


def _find_customer(email):
    return CustomerAccount.query.filter(
        db.func.lower(CustomerAccount.email) == normalize_email(email)
    )


def register_customer(name, email, password, phone, now) -> CustomerSession:
    email = normalize_email(email)
    if not name or not email or not password or not phone:
        raise ValidationError("Please provide all required fields")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if _find_customer(email).first():
        raise DuplicateError("User already exists with this email")

    customer = CustomerAccount(
        name=name.strip(),
        email=email,
        phone=phone.strip(),
        password_hash=hash_password(password),
        status=AccountStatus.ACTIVE.value,
        status_changed_at=now,
        last_login_at=now,
        login_attempts=0,
    )
    with transactional("Failed to register customer"):
        db.session.add(customer)
    logger.info({"event": "customer_registered", "customer_id": customer.id})
    return CustomerSession(
        customer=customer,
        resolved=resolve_status(customer, now),
        token=create_access_token(customer.id, CUSTOMER),
        refresh_token=create_refresh_token(customer.id, CUSTOMER),
    )


def authenticate_customer(email, password, now) -> CustomerSession:
    if not email or not password:
        raise ValidationError("Please provide email and password")

    # row lock serialises concurrent attempts on the same account
    customer = _find_customer(email).with_for_update().first()
    if customer is None:
        LOGIN_ATTEMPTS.labels(CUSTOMER, "unknown").inc()
        raise AuthenticationError()

    # commit even when refusing: failed attempts and lockouts must persist
    with transactional("Failed to record customer login"):
        decision = lifecycle.check_login(customer, password, now)
    if not decision.allowed:
        LOGIN_ATTEMPTS.labels(CUSTOMER, decision.error.code.lower()).inc()
        raise decision.error

    LOGIN_ATTEMPTS.labels(CUSTOMER, "success").inc()
    logger.info({
        "event": "customer_login",
        "customer_id": customer.id,
        "resolved_status": decision.resolved.status.value,
    })
    return CustomerSession(
        customer=customer,
        resolved=decision.resolved,
        token=create_access_token(customer.id, CUSTOMER),
        refresh_token=create_refresh_token(customer.id, CUSTOMER),
        warning=decision.warning,
        info=decision.info,
    )


def _admin_session(admin) -> AdminSession:
    role = refresh_role(admin, owner_email())
    token = create_access_token(admin.id, ADMIN, role.value)
    return AdminSession(
        admin=admin,
        role=role,
        token=token,
        refresh_token=create_refresh_token(admin.id, ADMIN),
    )


def authenticate_admin(email, password) -> AdminSession:
    if not email or not password:
        raise ValidationError("Please provide email and password")

    admin = AdminAccount.query.filter(
        db.func.lower(AdminAccount.email) == normalize_email(email)
    ).first()
    if admin is None or not verify_password(password, admin.password_hash):
        LOGIN_ATTEMPTS.labels(ADMIN, "invalid_credentials").inc()
        raise AuthenticationError("Invalid admin credentials")
    if admin.status != "Active":
        LOGIN_ATTEMPTS.labels(ADMIN, "disabled").inc()
        raise AuthenticationError("Your admin account has been disabled", code="ACCOUNT_DISABLED")

    with transactional("Failed to refresh admin role"):
        session = _admin_session(admin)
    LOGIN_ATTEMPTS.labels(ADMIN, "success").inc()
    logger.info({"event": "admin_login", "admin_id": admin.id, "role": session.role.value})
    return session


def _claims(token, kind, expected_type="access") -> dict:
    if not token:
        raise AuthenticationError("Token missing", code="INVALID_TOKEN")
    try:
        return decode_token(token, expected_type=expected_type, expected_kind=kind)
    except TokenError as e:
        raise AuthenticationError(str(e), code="INVALID_TOKEN")


def _principal_id(claims) -> int:
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("invalid token", code="INVALID_TOKEN")


def load_customer(token) -> CustomerAccount:
    claims = _claims(token, CUSTOMER)
    customer = db.session.get(CustomerAccount, _principal_id(claims))
    if customer is None:
        raise AuthenticationError("User not found", code="INVALID_TOKEN")
    return customer


def load_admin(token) -> AdminSession:
    """Admin behind an access token, with the role pinned in the token.

    The effective role never exceeds what the current email resolves to.
    """
    claims = _claims(token, ADMIN)
    admin = db.session.get(AdminAccount, _principal_id(claims))
    if admin is None:
        raise AuthenticationError("Admin not found", code="INVALID_TOKEN")
    if admin.status != "Active":
        raise AuthorizationError("Your admin account has been disabled")

    pinned = claims.get("role")
    current = resolve_role(admin.email, owner_email())
    role = Role.MAIN_ADMIN if pinned == Role.MAIN_ADMIN.value and current is Role.MAIN_ADMIN else Role.SUB_ADMIN
    return AdminSession(admin=admin, role=role, token=token, refresh_token="", claims=claims)


def refresh_tokens(refresh_token, now) -> dict:
    """New access token for a refresh token; admins get a freshly resolved role."""
    claims = _claims(refresh_token, None, expected_type="refresh")

    kind = claims.get("kind")
    if kind == CUSTOMER:
        customer = db.session.get(CustomerAccount, _principal_id(claims))
        if customer is None:
            raise AuthenticationError("User not found", code="INVALID_TOKEN")
        with transactional("Failed to reconcile customer status"):
            lifecycle.enforce_account_action(customer, now)
        token = create_access_token(customer.id, CUSTOMER)
        role = None
    elif kind == ADMIN:
        admin = db.session.get(AdminAccount, _principal_id(claims))
        if admin is None:
            raise AuthenticationError("Admin not found", code="INVALID_TOKEN")
        if admin.status != "Active":
            raise AuthorizationError("Your admin account has been disabled")
        with transactional("Failed to refresh admin role"):
            session = _admin_session(admin)
        token, role = session.token, session.role.value
    else:
        raise AuthenticationError("invalid token", code="INVALID_TOKEN")

    payload = {
        "token": token,
        "refresh_token": create_refresh_token(claims["sub"], kind),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    }
    if role:
        payload["role"] = role
    return payload
