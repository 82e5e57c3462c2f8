from functools import wraps
from flask import request, g
from models import utcnow
from app.auth.roles import role_has_scope
from app.services import auth_gateway, lifecycle
from app.services.exceptions import AuthorizationError
from .db import transactional


def bearer_token():
    auth = request.headers.get("Authorization", "")
    return auth.split(" ", 1)[1].strip() if auth.startswith("Bearer ") else auth.strip()


def customer_required(func):
    """Load the customer behind the bearer token into ``g.customer``."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        g.customer = auth_gateway.load_customer(bearer_token())
        g.principal_id = g.customer.id
        return func(*args, **kwargs)

    return wrapper


def _gate(enforce, message):
    def decorator(func):
        @wraps(func)
        @customer_required
        def wrapper(*args, **kwargs):
            with transactional(message):
                g.account_status = enforce(g.customer, utcnow())
            g.account_warning = g.account_status.advisory(g.customer.last_login_at)
            return func(*args, **kwargs)

        return wrapper

    return decorator


# Only BLOCKED is refused; SUSPENDED/INACTIVE pass with g.account_warning set
account_status_required = _gate(lifecycle.enforce_account_action, "Failed to reconcile account status")

# BLOCKED and SUSPENDED are refused
order_placement_required = _gate(lifecycle.enforce_order_placement, "Failed to reconcile account status")


def admin_required(func):
    """Load the admin behind the bearer token; role is the one pinned at login."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        session = auth_gateway.load_admin(bearer_token())
        g.admin = session.admin
        g.principal_id = session.admin.id
        g.role = session.role.value
        return func(*args, **kwargs)

    return wrapper


def _to_set(obj):
    return set(obj) if isinstance(obj, (list, tuple, set)) else {obj}


def role_required(required):
    """Authorize based on admin role or scoped action.

    Accepts "MAIN_ADMIN", ["MAIN_ADMIN", "SUB_ADMIN:manage_customers"], ...
    Must run after ``admin_required``.
    """
    required_set = _to_set(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = getattr(g, "role", None)
            if not role:
                raise AuthorizationError()
            for entry in required_set:
                if ":" in entry:
                    r, action = entry.split(":", 1)
                    if role == r and role_has_scope(role, action):
                        break
                else:
                    if role == entry:
                        break
            else:
                raise AuthorizationError()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
