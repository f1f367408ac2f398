import pytest

from blog_portal.core.route_guard import (GuardAction, RouteGuard, normalize_path,
                                          token_from_request)
from blog_portal.models import Role


@pytest.fixture
def guard():
    return RouteGuard()


@pytest.mark.parametrize("path", ["/login", "/register", "/", "/unauthorized", "/login?next=/admin"])
def test_public_paths_always_allowed(guard, path):
    decision = guard.check(path, token=None)
    assert decision.allowed
    assert decision.redirect_to is None


def test_unlisted_non_public_path_is_allowed(guard):
    """未出现在允许表中的路径不受保护"""
    assert guard.check("/about", token=None).allowed
    assert guard.check("/articlesx", token=None).allowed


def test_protected_path_without_token_redirects_to_login(guard):
    decision = guard.check("/articles", token=None)
    assert decision.action is GuardAction.REDIRECT_LOGIN
    assert decision.redirect_to == "/login"


@pytest.mark.parametrize("token", ["garbage", "a.!!!.c", "a.bm90LWpzb24.c", "onlyone."])
def test_undecodable_token_redirects_to_login_never_unauthorized(guard, token):
    decision = guard.check("/admin/articles", token=token)
    assert decision.action is GuardAction.REDIRECT_LOGIN


def test_json_array_payload_counts_as_invalid(guard):
    # "[1]" base64 编码
    decision = guard.check("/articles", token="h.WzFd.s")
    assert decision.redirect_to == "/login"


def test_identity_one_without_role_is_admin(guard, make_token):
    assert guard.check("/admin/articles", make_token(userId=1)).allowed
    assert guard.check("/admin", make_token(userId="1")).allowed


def test_id_claim_alone_grants_no_role(guard, make_token):
    assert guard.check("/admin/articles", make_token(id=1)).redirect_to == "/unauthorized"
    assert guard.check("/articles", make_token(id=5)).redirect_to == "/unauthorized"


def test_other_identity_without_role_is_user(guard, make_token):
    token = make_token(userId=42)
    assert guard.check("/articles/7", token).allowed
    decision = guard.check("/admin/articles", token)
    assert decision.action is GuardAction.REDIRECT_UNAUTHORIZED
    assert decision.redirect_to == "/unauthorized"


def test_explicit_role_wins_over_identity(guard, make_token):
    token = make_token(userId=1, role="User")
    assert guard.check("/admin/categories", token).redirect_to == "/unauthorized"


def test_unknown_role_is_unauthorized(guard, make_token):
    decision = guard.check("/articles", make_token(userId=5, role="superuser"))
    assert decision.action is GuardAction.REDIRECT_UNAUTHORIZED


def test_no_identity_no_role_is_unauthorized(guard, make_token):
    decision = guard.check("/articles", make_token(name="nobody"))
    assert decision.action is GuardAction.REDIRECT_UNAUTHORIZED


def test_admin_role_may_read_articles(guard, make_token):
    assert guard.check("/articles", make_token(role="Admin", userId=9)).allowed


def test_required_roles_prefix_match(guard):
    assert guard.required_roles("/admin/articles/create") == (Role.ADMIN,)
    assert guard.required_roles("/articles/12") == (Role.USER, Role.ADMIN)
    assert guard.required_roles("/about") is None


def test_custom_route_table():
    guard = RouteGuard(protected_routes={"/reports": [Role.ADMIN]}, public_routes=["/"])
    assert guard.check("/articles").allowed
    assert guard.check("/reports").redirect_to == "/login"


def test_token_from_request_prefers_cookie():
    assert token_from_request({"token": "cookie-tok"}, {"Authorization": "Bearer header-tok"}) == "cookie-tok"
    assert token_from_request({}, {"authorization": "Bearer header-tok"}) == "header-tok"
    assert token_from_request(None, None) is None


def test_check_request_reads_header(guard, make_token):
    token = make_token(userId=1)
    decision = guard.check_request("/admin", headers={"Authorization": f"Bearer {token}"})
    assert decision.allowed


def test_normalize_path():
    assert normalize_path("") == "/"
    assert normalize_path("/articles?page=2#top") == "/articles"
