"""
Admin roles. The role of an admin is a function of its email alone; the
``role`` column on AdminAccount is only a cache of ``resolve_role``.
"""
import enum


class Role(str, enum.Enum):
    MAIN_ADMIN = "MAIN_ADMIN"
    SUB_ADMIN = "SUB_ADMIN"


ROLE_SCOPES = {
    Role.MAIN_ADMIN: {"*"},
    Role.SUB_ADMIN: {"manage_customers"},
}


def normalize_email(email) -> str:
    return (email or "").strip().lower()


def resolve_role(email: str, owner_email: str) -> Role:
    owner = normalize_email(owner_email)
    if owner and normalize_email(email) == owner:
        return Role.MAIN_ADMIN
    return Role.SUB_ADMIN


def role_has_scope(role: str, action: str) -> bool:
    try:
        scopes = ROLE_SCOPES[Role(role)]
    except ValueError:
        return False
    return "*" in scopes or action in scopes
