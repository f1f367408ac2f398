#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
会话服务模块 - 负责登录态的恢复、建立与清除

会话对象由依赖注入容器创建，显式传递给需要它的视图与 ViewModel，
不存在全局可变的会话单例。
"""

import logging
from typing import Optional, Dict, Any

from PySide6.QtCore import QObject, Signal as pyqtSignal

from blog_portal.models import Role, User
from blog_portal.core.token_codec import decode_claims, claims_identity, resolve_role
from blog_portal.storage.session_storage import SessionStorage, SessionCookie

DEFAULT_ADMIN_USERNAME = "myadmin"
DEFAULT_USER_USERNAME = "testuser"


class SessionService(QObject):
    """
    当前会话。

    对外接口: current() / login() / logout() / has_role() / is_admin() / is_user()。
    """

    session_changed = pyqtSignal(object)  # 发射 User 或 None
    logged_out = pyqtSignal()

    def __init__(self, storage: SessionStorage, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.logger = logging.getLogger('blog_portal.core.session_service')
        self._storage = storage
        self._user: Optional[User] = None
        self._token: Optional[str] = None
        self._restored = False

    # --- 生命周期 ---
    def restore(self) -> Optional[User]:
        """
        启动时尽力恢复会话 (不重新校验令牌)。

        - 令牌与用户对象都存在: 直接信任存储的用户对象。
        - 只有令牌: 解码并采用 payload 作为用户对象。
        - 解码失败: 清除令牌。
        - 令牌签发已超过 7 天: 清除整个会话。
        """
        token = self._storage.load_token()
        user_data, corrupt = self._storage.load_user_data()

        if token and self._storage.is_expired():
            self.logger.info("Stored session is older than 7 days, clearing it.")
            self._storage.clear()
        elif token and corrupt:
            self.logger.warning("Stored user data is corrupt, clearing session.")
            self._storage.clear()
        elif token and user_data is not None:
            user = User.from_dict(user_data)
            if user is not None:
                self._set_state(token, user)
            else:
                self.logger.warning("Stored user data has no usable role, session stays anonymous.")
        elif token:
            claims = decode_claims(token)
            if claims is None:
                self.logger.warning("Stored token could not be decoded, clearing it.")
                self._storage.clear_token()
            else:
                user = self._user_from_payload(claims)
                if user is not None:
                    self._set_state(token, user)
                else:
                    self.logger.info("Stored token payload carries no resolvable role, session stays anonymous.")

        self._restored = True
        self.logger.info(f"Session restore finished. Authenticated: {self.is_authenticated}")
        self.session_changed.emit(self._user)
        return self._user

    @property
    def restored(self) -> bool:
        return self._restored

    # --- 登录 / 登出 ---
    def login(self, token: str, role: Optional[str] = None, username: Optional[str] = None) -> Optional[User]:
        """
        使用令牌建立会话。

        Args:
            token: 服务端返回的令牌。
            role: 服务端返回的角色 (可选)。
            username: 用户名 (可选)。

        Returns:
            建立的 User；令牌无法解码或无法合成有效用户时返回 None (静默失败，不抛出异常)。
        """
        claims = decode_claims(token)
        if claims is None:
            self.logger.warning("Login ignored: token could not be decoded.")
            return None

        user = self._user_from_full_claims(claims)
        if user is None:
            user = self._synthesize_user(claims, role, username)
        if user is None:
            self.logger.warning("Login ignored: could not derive a user record from the token.")
            return None

        self._storage.save(token, user.to_dict())
        self._set_state(token, user)
        self.logger.info(f"User '{user.username}' logged in with role {user.role.value}.")
        self.session_changed.emit(user)
        return user

    def logout(self):
        """清除持久化与内存中的会话，并通知界面返回登录页"""
        previous = self._user.username if self._user else None
        self._storage.clear()
        self._token = None
        self._user = None
        self.logger.info(f"User logged out: {previous}")
        self.session_changed.emit(None)
        self.logged_out.emit()

    # --- 查询 ---
    def current(self) -> Optional[User]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def cookie(self) -> Optional[SessionCookie]:
        """
        由权威存储派生的 token cookie。

        运行期间令牌过期时会话随之失效，并发射 session_changed(None)。
        """
        if self._token is None:
            return None
        if self._storage.is_expired():
            self._expire()
            return None
        return self._storage.cookie()

    def has_role(self, role: Any) -> bool:
        if self._user is None:
            return False
        return self._user.role == Role.parse(role)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def is_user(self) -> bool:
        return self.has_role(Role.USER)

    # --- 内部 ---
    def _expire(self):
        previous = self._user.username if self._user else None
        self._storage.clear()
        self._token = None
        self._user = None
        self.logger.info(f"Session of '{previous}' expired, cleared.")
        self.session_changed.emit(None)

    def _set_state(self, token: str, user: User):
        self._token = token
        self._user = user

    def _user_from_full_claims(self, claims: Dict[str, Any]) -> Optional[User]:
        """claims 已经是完整用户记录 (id + username + role) 时直接使用"""
        if claims.get("id") in (None, "") or not claims.get("username") or not claims.get("role"):
            return None
        return User.from_dict(claims)

    def _user_from_payload(self, claims: Dict[str, Any]) -> Optional[User]:
        """恢复会话时采用 payload；角色按守卫相同的规则推导"""
        user = self._user_from_full_claims(claims)
        if user is not None:
            return user
        return self._synthesize_user(claims, None, None)

    def _synthesize_user(self, claims: Dict[str, Any], role: Optional[str],
                         username: Optional[str]) -> Optional[User]:
        identity = claims_identity(claims)
        if identity is None:
            return None
        resolved = Role.parse(role) if role else resolve_role(claims)
        if resolved is None:
            return None
        name = (username
                or claims.get("username")
                or claims.get("name")
                or (DEFAULT_ADMIN_USERNAME if resolved is Role.ADMIN else DEFAULT_USER_USERNAME))
        return User(id=str(identity), username=str(name), role=resolved,
                    email=str(claims.get("email") or ""))
