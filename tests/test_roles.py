import pytest

from app.auth.roles import Role, normalize_email, resolve_role, role_has_scope

OWNER = "Owner@Storefront.test"


@pytest.mark.parametrize("email", ["owner@storefront.test", "  OWNER@storefront.TEST ", OWNER])
def test_owner_email_resolves_main_admin(email):
    assert resolve_role(email, OWNER) is Role.MAIN_ADMIN


@pytest.mark.parametrize("email", ["staff@storefront.test", "owner@storefront.test.evil", "", None])
def test_other_emails_resolve_sub_admin(email):
    assert resolve_role(email, OWNER) is Role.SUB_ADMIN


def test_empty_owner_never_matches():
    assert resolve_role("", "") is Role.SUB_ADMIN
    assert resolve_role(None, None) is Role.SUB_ADMIN


def test_normalize_email():
    assert normalize_email("  A@B.Com ") == "a@b.com"
    assert normalize_email(None) == ""


def test_scopes():
    assert role_has_scope("MAIN_ADMIN", "manage_admins")
    assert role_has_scope("SUB_ADMIN", "manage_customers")
    assert not role_has_scope("SUB_ADMIN", "manage_admins")
    assert not role_has_scope("SUPERUSER", "manage_customers")
