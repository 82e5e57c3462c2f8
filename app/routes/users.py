from flask import Blueprint, request, g
from models import utcnow
from app.version import API_PREFIX
from app.schemas.admin import BlockCustomerRequest, SuspendCustomerRequest
from app.services import lifecycle
from app.utils import ok, admin_required, role_required, transactional, validate_schema

users_bp = Blueprint("users", __name__, url_prefix=f"{API_PREFIX}/users")


@users_bp.before_request
@admin_required
@role_required(["MAIN_ADMIN", "SUB_ADMIN:manage_customers"])
def _enforce_admin_role():
    """Ensure the requester is an authenticated, active admin."""
    return None


def _status_payload(account):
    return {
        "id": account.id,
        "name": account.name,
        "email": account.email,
        "status": account.status,
        "status_reason": account.status_reason,
        "status_changed_at": account.status_changed_at.isoformat() if account.status_changed_at else None,
        "status_changed_by": account.status_changed_by,
        "suspension_until": account.suspension_until.isoformat() if account.suspension_until else None,
    }


@users_bp.route("/<int:user_id>/block", methods=["PUT"])
@validate_schema(BlockCustomerRequest)
def block_user(user_id):
    data: BlockCustomerRequest = request.validated_data
    with transactional("Failed to block user"):
        account = lifecycle.block_customer(user_id, data.reason, g.admin.email, utcnow())
    return ok({"user": _status_payload(account)}, message="User blocked successfully")


@users_bp.route("/<int:user_id>/unblock", methods=["PUT"])
def unblock_user(user_id):
    with transactional("Failed to unblock user"):
        account = lifecycle.unblock_customer(user_id, g.admin.email, utcnow())
    return ok({"user": _status_payload(account)}, message="User unblocked successfully")


@users_bp.route("/<int:user_id>/suspend", methods=["PUT"])
@validate_schema(SuspendCustomerRequest)
def suspend_user(user_id):
    data: SuspendCustomerRequest = request.validated_data
    with transactional("Failed to suspend user"):
        account = lifecycle.suspend_customer(user_id, data.reason, g.admin.email, utcnow(), days=data.days)
    return ok({"user": _status_payload(account)}, message="User suspended successfully")


@users_bp.route("/<int:user_id>/activate", methods=["PUT"])
def activate_user(user_id):
    with transactional("Failed to activate user"):
        account = lifecycle.activate_customer(user_id, g.admin.email, utcnow())
    return ok({"user": _status_payload(account)}, message="User activated successfully")


@users_bp.route("/<int:user_id>/status", methods=["GET"])
def user_status(user_id):
    account = lifecycle.get_customer(user_id)
    return ok({"user": lifecycle.customer_status_report(account, utcnow())})
