from .status import (
    AccountStatus,
    ResolvedStatus,
    Transition,
    apply_transition,
    implied_transition,
    resolve_status,
)
from .roles import Role, normalize_email, resolve_role, role_has_scope

__all__ = [
    'AccountStatus',
    'ResolvedStatus',
    'Transition',
    'apply_transition',
    'implied_transition',
    'resolve_status',
    'Role',
    'normalize_email',
    'resolve_role',
    'role_has_scope',
]
