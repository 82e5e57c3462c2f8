from .auth import auth_bp
from .account import account_bp
from .users import users_bp
from .admin_management import admin_management_bp


__all__ = [
    'auth_bp',
    'account_bp',
    'users_bp',
    'admin_management_bp',
]
