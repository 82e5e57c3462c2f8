from flask import Blueprint, request, current_app, g
from flask_limiter.util import get_remote_address
from extensions import limiter
from models import utcnow
from app.version import API_PREFIX
from app.schemas.auth import RegisterRequest, LoginRequest, RefreshRequest
from app.services import auth_gateway
from app.utils import ok, validate_schema, account_status_required, bearer_token, decode_token, TokenError
from app.services.exceptions import AuthenticationError


auth_bp = Blueprint("auth", __name__, url_prefix=f"{API_PREFIX}/auth")


def _customer_payload(customer, status):
    data = customer.to_dict()
    data["status"] = status
    return data


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["REGISTER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many registrations from this IP",
)
@validate_schema(RegisterRequest)
def register():
    data: RegisterRequest = request.validated_data
    session = auth_gateway.register_customer(data.name, data.email, data.password, data.phone, utcnow())
    return ok({
        "token": session.token,
        "refresh_token": session.refresh_token,
        "customer": _customer_payload(session.customer, session.resolved.status.value),
    }, message="Registration successful", status=201)


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many logins from this IP",
)
@validate_schema(LoginRequest)
def login():
    data: LoginRequest = request.validated_data
    session = auth_gateway.authenticate_customer(data.email, data.password, utcnow())
    status = session.resolved.status.value
    payload = {
        "token": session.token,
        "refresh_token": session.refresh_token,
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
        "status": status,
        "customer": _customer_payload(session.customer, status),
    }
    message = "Login successful"
    if session.warning:
        payload["warning"] = session.warning
    if session.info:
        payload["info"] = session.info
        message = session.info["message"]
    return ok(payload, message=message)


@auth_bp.route("/admin/login", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ADMIN_LOGIN_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many admin logins from this IP",
)
@validate_schema(LoginRequest)
def admin_login():
    data: LoginRequest = request.validated_data
    session = auth_gateway.authenticate_admin(data.email, data.password)
    return ok({
        "token": session.token,
        "refresh_token": session.refresh_token,
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
        "role": session.role.value,
        "admin": session.admin.to_dict(),
    }, message="Admin login successful")


@auth_bp.route("/refresh", methods=["POST"])
@validate_schema(RefreshRequest)
def refresh():
    data: RefreshRequest = request.validated_data
    return ok(auth_gateway.refresh_tokens(data.refresh_token, utcnow()))


# --- Logout handler ---
@auth_bp.route("/logout", methods=["POST"])
def logout():
    token = bearer_token()
    if not token:
        raise AuthenticationError("Token missing", code="INVALID_TOKEN")
    try:
        decode_token(token)
    except TokenError as e:
        raise AuthenticationError(str(e), code="INVALID_TOKEN")
    return ok(message="Logged out")


@auth_bp.route("/me", methods=["GET"])
@account_status_required
def me():
    status = g.account_status.status.value
    data = {"customer": _customer_payload(g.customer, status), "status": status}
    if g.account_warning:
        data["warning"] = g.account_warning
    return ok(data)
