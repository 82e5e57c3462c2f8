from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.admin import CreateAdminRequest, UpdateAdminRequest
from app.services import admin_governor
from app.services.auth_gateway import owner_email
from app.utils import ok, admin_required, role_required, transactional, validate_schema

admin_management_bp = Blueprint(
    "admin_management", __name__, url_prefix=f"{API_PREFIX}/admin-management"
)


@admin_management_bp.before_request
@admin_required
@role_required("MAIN_ADMIN")
def _enforce_main_admin():
    """Admin management is restricted to the owner account."""
    return None


@admin_management_bp.route("/admins", methods=["GET"])
def list_admins():
    with transactional("Failed to list admins"):
        admins = admin_governor.list_admins(owner_email())
        data = [a.to_dict() for a in admins]
    return ok({"count": len(data), "admins": data})


@admin_management_bp.route("/admins/<int:admin_id>", methods=["GET"])
def get_admin(admin_id):
    admin = admin_governor.get_admin(admin_id)
    admin_governor.refresh_role(admin, owner_email())
    return ok({"admin": admin.to_dict()})


@admin_management_bp.route("/admins", methods=["POST"])
@validate_schema(CreateAdminRequest)
def create_admin():
    data: CreateAdminRequest = request.validated_data
    with transactional("Failed to create admin"):
        admin = admin_governor.create_admin(
            data.name,
            data.email,
            data.password,
            owner_email(),
            status=data.status,
            created_by=g.admin.id,
        )
    return ok({"admin": admin.to_dict()}, message="Admin created successfully", status=201)


@admin_management_bp.route("/admins/<int:admin_id>", methods=["PUT"])
@validate_schema(UpdateAdminRequest)
def update_admin(admin_id):
    data: UpdateAdminRequest = request.validated_data
    with transactional("Failed to update admin"):
        admin = admin_governor.update_admin(
            admin_id,
            owner_email(),
            name=data.name,
            email=data.email,
            status=data.status,
        )
    return ok({"admin": admin.to_dict()}, message="Admin updated successfully")


@admin_management_bp.route("/admins/<int:admin_id>", methods=["DELETE"])
def delete_admin(admin_id):
    with transactional("Failed to delete admin"):
        admin_governor.delete_admin(admin_id, owner_email())
    return ok(message="Admin deleted successfully")
