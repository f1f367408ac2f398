"""
会话持久化

令牌与用户对象只存放在一个权威位置 (QSettings)。
`token` cookie 不单独存储，而是每次从权威存储中重新生成。
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple, Dict, Any

from PySide6.QtCore import QSettings

COOKIE_MAX_AGE_SECONDS = 7 * 24 * 60 * 60


@dataclass(frozen=True)
class SessionCookie:
    """由会话派生的 token cookie"""
    name: str
    value: str
    path: str = "/"
    max_age: int = COOKIE_MAX_AGE_SECONDS
    issued_at: Optional[datetime] = None

    @property
    def expires_at(self) -> Optional[datetime]:
        if self.issued_at is None:
            return None
        return self.issued_at + timedelta(seconds=self.max_age)


class SessionStorage:
    """基于 QSettings 的会话存储"""

    TOKEN_KEY = "auth/token"
    USER_KEY = "auth/user_data"
    ISSUED_AT_KEY = "auth/issued_at"
    COOKIE_NAME = "token"

    def __init__(self, settings: Optional[QSettings] = None):
        self.logger = logging.getLogger('blog_portal.storage.session')
        self.settings = settings if settings is not None else QSettings("BlogPortal", "BlogPortalClient")
        self.logger.debug(f"SessionStorage using settings file: {self.settings.fileName()}")

    # --- 读取 ---
    def load_token(self) -> Optional[str]:
        token = self.settings.value(self.TOKEN_KEY, None)
        return str(token) if token else None

    def load_user_data(self) -> Tuple[Optional[Dict[str, Any]], bool]:
        """
        读取持久化的用户对象。

        Returns:
            (user_dict, corrupt)：不存在时为 (None, False)；
            存在但无法解析为 JSON 对象时为 (None, True)。
        """
        raw = self.settings.value(self.USER_KEY, None)
        if not raw:
            return None, False
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            self.logger.error(f"Error parsing stored user data: {e}")
            return None, True
        if not isinstance(data, dict):
            self.logger.error(f"Stored user data is not an object: {type(data).__name__}")
            return None, True
        return data, False

    # --- 写入 ---
    def save(self, token: str, user_data: Dict[str, Any]):
        """令牌与用户对象一起写入"""
        self.settings.setValue(self.TOKEN_KEY, token)
        self.settings.setValue(self.USER_KEY, json.dumps(user_data, ensure_ascii=False))
        self.settings.setValue(self.ISSUED_AT_KEY, datetime.now(timezone.utc).isoformat())
        self.settings.sync()
        self.logger.debug("Session persisted (token + user data).")

    def clear_token(self):
        self.settings.remove(self.TOKEN_KEY)
        self.settings.remove(self.ISSUED_AT_KEY)
        self.settings.sync()

    def clear(self):
        """令牌与用户对象一起清除"""
        for key in (self.TOKEN_KEY, self.USER_KEY, self.ISSUED_AT_KEY):
            self.settings.remove(key)
        self.settings.sync()
        self.logger.debug("Session storage cleared.")

    # --- 派生 cookie ---
    def _issued_at(self) -> Optional[datetime]:
        raw = self.settings.value(self.ISSUED_AT_KEY, None)
        if not raw:
            return None
        try:
            issued_at = datetime.fromisoformat(str(raw))
        except ValueError:
            return None
        # 无时区的时间按 UTC 处理
        return issued_at if issued_at.tzinfo else issued_at.replace(tzinfo=timezone.utc)

    def _build_cookie(self, token: str) -> SessionCookie:
        return SessionCookie(name=self.COOKIE_NAME, value=token, issued_at=self._issued_at())

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """令牌存在且签发时间早于 7 天前时返回 True；没有签发时间的令牌不过期"""
        token = self.load_token()
        if not token:
            return False
        expires_at = self._build_cookie(token).expires_at
        return expires_at is not None and expires_at <= (now or datetime.now(timezone.utc))

    def cookie(self) -> Optional[SessionCookie]:
        """从当前令牌重新生成 cookie；无令牌或已过期时返回 None"""
        token = self.load_token()
        if not token:
            return None
        if self.is_expired():
            self.logger.info("Session cookie expired (older than 7 days).")
            return None
        return self._build_cookie(token)
