from flask import Blueprint, g
from app.version import API_PREFIX
from app.utils import ok, order_placement_required

account_bp = Blueprint("account", __name__, url_prefix=f"{API_PREFIX}/account")


@account_bp.route("/order-eligibility", methods=["GET"])
@order_placement_required
def order_eligibility():
    """Checked by the order service before accepting a new order."""
    return ok({
        "can_place_orders": True,
        "status": g.account_status.status.value,
        "warning": g.account_warning,
    })
