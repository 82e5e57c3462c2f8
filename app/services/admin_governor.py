"""
Admin account management guarded around the owner account.

The owner is whichever admin carries the configured owner email; it is the
only account resolving to MAIN_ADMIN. Roles are always re-derived from the
email, never taken from a request. Nothing here commits.
"""
import logging

from models import db
from models.admin import AdminAccount
from app.auth.roles import Role, normalize_email, resolve_role
from app.services.exceptions import (
    DuplicateError,
    NotFoundError,
    ProtectedEntityError,
    ValidationError,
)
from app.utils.passwords import hash_password

logger = logging.getLogger(__name__)

ADMIN_STATUSES = ("Active", "Disabled")


def find_admin(email):
    return AdminAccount.query.filter(
        db.func.lower(AdminAccount.email) == normalize_email(email)
    ).first()


def _is_owner(admin, owner_email) -> bool:
    return resolve_role(admin.email, owner_email) is Role.MAIN_ADMIN


def _check_status(status):
    if status not in ADMIN_STATUSES:
        raise ValidationError("Status must be Active or Disabled")


def refresh_role(admin, owner_email) -> Role:
    """Re-derive the cached role of ``admin`` from its email."""
    role = resolve_role(admin.email, owner_email)
    admin.role = role.value
    return role


def get_admin(admin_id) -> AdminAccount:
    admin = db.session.get(AdminAccount, admin_id)
    if admin is None:
        raise NotFoundError("Admin not found")
    return admin


def list_admins(owner_email):
    admins = AdminAccount.query.order_by(AdminAccount.created_at.desc(), AdminAccount.id.desc()).all()
    for admin in admins:
        refresh_role(admin, owner_email)
    return admins


def create_admin(name, email, password, owner_email, status="Active", created_by=None) -> AdminAccount:
    email = normalize_email(email)
    if not name or not email or not password:
        raise ValidationError("Please provide name, email, and password")
    _check_status(status)
    if find_admin(email):
        raise DuplicateError("Admin with this email already exists")

    admin = AdminAccount(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        status=status,
        created_by=created_by,
    )
    refresh_role(admin, owner_email)
    db.session.add(admin)
    db.session.flush()
    logger.info({"event": "admin_created", "admin_id": admin.id, "role": admin.role})
    return admin


def update_admin(admin_id, owner_email, name=None, email=None, status=None) -> AdminAccount:
    admin = get_admin(admin_id)
    new_email = normalize_email(email) if email else None

    if new_email and new_email != normalize_email(admin.email) and _is_owner(admin, owner_email):
        raise ProtectedEntityError("Cannot change the MAIN_ADMIN email")

    if name:
        admin.name = name.strip()
    if new_email and new_email != normalize_email(admin.email):
        existing = find_admin(new_email)
        if existing and existing.id != admin.id:
            raise DuplicateError("Email is already in use")
        admin.email = new_email
    if status:
        _check_status(status)
        admin.status = status

    refresh_role(admin, owner_email)
    logger.info({"event": "admin_updated", "admin_id": admin.id, "role": admin.role})
    return admin


def delete_admin(admin_id, owner_email) -> None:
    admin = get_admin(admin_id)
    if _is_owner(admin, owner_email):
        raise ProtectedEntityError("Cannot delete the MAIN_ADMIN account")
    db.session.delete(admin)
    logger.info({"event": "admin_deleted", "admin_id": admin_id})


def count_main_admins(owner_email) -> int:
    """How many admins resolve to MAIN_ADMIN (1 once the owner exists)."""
    return sum(
        1 for admin in AdminAccount.query.all()
        if resolve_role(admin.email, owner_email) is Role.MAIN_ADMIN
    )


def sync_admin_roles(owner_email) -> int:
    """Re-derive every cached role; returns how many rows changed."""
    changed = 0
    for admin in AdminAccount.query.all():
        before = admin.role
        if refresh_role(admin, owner_email).value != before:
            changed += 1
    return changed
