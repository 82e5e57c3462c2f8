from app.routes import (
    auth_bp,
    account_bp,
    users_bp,
    admin_management_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(admin_management_bp)
