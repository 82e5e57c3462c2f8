from .responses import ok, error, validation_error_response, internal_error_response
from .auth import (
    bearer_token,
    customer_required,
    account_status_required,
    order_placement_required,
    admin_required,
    role_required,
)
from .validation import validate_schema
from .db import transactional
from .passwords import hash_password, verify_password
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'internal_error_response',
    'bearer_token',
    'customer_required',
    'account_status_required',
    'order_placement_required',
    'admin_required',
    'role_required',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'transactional',
    'hash_password',
    'verify_password',
]
