import pytest

from app.api.deps import ROLE_PERMISSIONS, has_permission
from app.models import UserRole


@pytest.mark.parametrize(
    "role,permission,allowed",
    [
        (UserRole.FOUNDER, "inventory:delete", True),
        (UserRole.FOUNDER, "users:manage", True),
        (UserRole.SALESMAN, "sales:create", True),
        (UserRole.SALESMAN, "purchases:view", False),
        (UserRole.SALESMAN, "reports:view", False),
        (UserRole.ACCOUNTING, "reports:view", True),
        (UserRole.ACCOUNTING, "sales:create", False),
        (UserRole.ACCOUNTING, "bills:manage", False),
    ],
)
def test_role_permissions(make_profile, role, permission, allowed):
    assert has_permission(make_profile(role), permission) is allowed


def test_founder_holds_every_permission():
    every = set().union(*ROLE_PERMISSIONS.values())
    assert ROLE_PERMISSIONS[UserRole.FOUNDER] == every


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/inventory/products"),
        ("GET", "/pos/cart"),
        ("POST", "/pos/cart/checkout"),
        ("GET", "/bills"),
        ("DELETE", "/bills/1"),
        ("GET", "/purchases/vendor-bills"),
        ("GET", "/expenses"),
        ("GET", "/reports/summary"),
        ("GET", "/users"),
    ],
)
def test_requires_auth(client, method, path):
    resp = client.request(method, path)
    assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
