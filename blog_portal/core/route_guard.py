#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
路由守卫模块 - 每次导航前根据路径与令牌决定放行或重定向

规则:
1. 公共路径直接放行。
2. 受保护路径先精确匹配，再按声明顺序前缀匹配 (route + "/")，首个命中生效。
3. 未声明的路径默认放行。
4. 命中受保护路径时: 无令牌 -> 登录页；令牌无法解码 -> 登录页；
   无可用角色或角色不在允许集合内 -> 无权限页。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from blog_portal.models import Role
from blog_portal.core.token_codec import decode_claims, resolve_role

LOGIN_PATH = "/login"
UNAUTHORIZED_PATH = "/unauthorized"

PUBLIC_ROUTES: Tuple[str, ...] = ("/login", "/register", "/", "/unauthorized")

# 声明顺序即前缀匹配顺序
PROTECTED_ROUTES: Dict[str, Tuple[Role, ...]] = {
    "/articles": (Role.USER, Role.ADMIN),
    "/admin": (Role.ADMIN,),
}

TOKEN_COOKIE_NAME = "token"


class GuardAction(str, Enum):
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_UNAUTHORIZED = "redirect_unauthorized"


@dataclass(frozen=True)
class GuardDecision:
    """守卫判定结果"""
    action: GuardAction
    path: str
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.action is GuardAction.ALLOW

    @property
    def redirect_to(self) -> Optional[str]:
        if self.action is GuardAction.REDIRECT_LOGIN:
            return LOGIN_PATH
        if self.action is GuardAction.REDIRECT_UNAUTHORIZED:
            return UNAUTHORIZED_PATH
        return None


def normalize_path(path: str) -> str:
    """去掉查询串与片段，空路径视为 '/'"""
    parsed = urlsplit(path or "/")
    return parsed.path or "/"


def token_from_request(cookies: Optional[Mapping[str, str]] = None,
                       headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    从 cookie 或 Authorization 头中读取令牌 (cookie 优先)。

    Args:
        cookies: cookie 名 -> 值。
        headers: 请求头 (名称大小写不敏感)。
    """
    if cookies:
        token = cookies.get(TOKEN_COOKIE_NAME)
        if token:
            return token
    if headers:
        for name, value in headers.items():
            if name.lower() == "authorization" and value:
                token = value.replace("Bearer ", "", 1).strip()
                return token or None
    return None


class RouteGuard:
    """基于路径前缀与角色允许表的导航守卫 (无副作用)"""

    def __init__(self,
                 protected_routes: Optional[Mapping[str, Sequence[Role]]] = None,
                 public_routes: Optional[Iterable[str]] = None):
        self.logger = logging.getLogger('blog_portal.core.route_guard')
        routes = PROTECTED_ROUTES if protected_routes is None else protected_routes
        self._protected: Dict[str, Tuple[Role, ...]] = {
            route: tuple(roles) for route, roles in routes.items()
        }
        self._public = frozenset(PUBLIC_ROUTES if public_routes is None else public_routes)

    def is_public(self, path: str) -> bool:
        return normalize_path(path) in self._public

    def required_roles(self, path: str) -> Optional[Tuple[Role, ...]]:
        """返回路径所需角色；未受保护时返回 None"""
        path = normalize_path(path)
        if path in self._protected:
            return self._protected[path]
        for route, roles in self._protected.items():
            if path == route or path.startswith(route + "/"):
                return roles
        return None

    def check(self, path: str, token: Optional[str] = None) -> GuardDecision:
        """
        判定一次导航。

        Args:
            path: 目标路径 (可以带查询串)。
            token: 原始令牌，可为 None。
        """
        path = normalize_path(path)
        if self.is_public(path):
            return GuardDecision(GuardAction.ALLOW, path, "public")

        required = self.required_roles(path)
        if required is None:
            return GuardDecision(GuardAction.ALLOW, path, "unprotected")

        if not token:
            self.logger.info(f"Guard: no token for protected path '{path}', redirecting to login.")
            return GuardDecision(GuardAction.REDIRECT_LOGIN, path, "missing token")

        claims = decode_claims(token)
        if claims is None:
            self.logger.warning(f"Guard: undecodable token for '{path}', redirecting to login.")
            return GuardDecision(GuardAction.REDIRECT_LOGIN, path, "invalid token")

        role = resolve_role(claims)
        if role is None:
            self.logger.info(f"Guard: token carries no usable role for '{path}'.")
            return GuardDecision(GuardAction.REDIRECT_UNAUTHORIZED, path, "no role")
        if role not in required:
            self.logger.info(f"Guard: role '{role.value}' not in {[r.value for r in required]} for '{path}'.")
            return GuardDecision(GuardAction.REDIRECT_UNAUTHORIZED, path, "role not allowed")

        self.logger.debug(f"Guard: '{path}' allowed for role '{role.value}'.")
        return GuardDecision(GuardAction.ALLOW, path, "role allowed")

    def check_request(self, path: str,
                      cookies: Optional[Mapping[str, str]] = None,
                      headers: Optional[Mapping[str, str]] = None) -> GuardDecision:
        """从 cookie/请求头取令牌后调用 check"""
        return self.check(path, token_from_request(cookies, headers))
