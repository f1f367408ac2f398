"""
页面路由

路径 -> 页面工厂；每次导航都先经过 RouteGuard，令牌取自会话派生的 token cookie。
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern

from PySide6.QtCore import QObject, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.route_guard import RouteGuard, TOKEN_COOKIE_NAME, normalize_path
from blog_portal.core.session_service import SessionService

PageFactory = Callable[[Dict[str, str]], Any]

NOT_FOUND_PATH = "/"
MAX_REDIRECTS = 5

_PARAM_RE = re.compile(r"\{(\w+)\}")


@dataclass
class _Route:
    pattern: str
    regex: Pattern
    factory: PageFactory


def _compile(pattern: str) -> Pattern:
    parts = _PARAM_RE.split(pattern)
    # split 结果中奇数位是参数名
    regex = "".join(
        f"(?P<{part}>[^/]+)" if i % 2 else re.escape(part)
        for i, part in enumerate(parts)
    )
    return re.compile(f"^{regex}$")


class Router(QObject):
    """
    维护路由表并执行导航。

    page_changed(path, page) 在守卫放行并由工厂创建页面后发射。
    """

    page_changed = pyqtSignal(str, object)
    navigation_blocked = pyqtSignal(str, str)  # 原路径, 重定向目标

    def __init__(self, guard: RouteGuard, session: SessionService, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.logger = logging.getLogger('blog_portal.ui.router')
        self._guard = guard
        self._session = session
        self._routes: List[_Route] = []
        self._current_path: Optional[str] = None
        self._history: List[str] = []
        self._session.logged_out.connect(self._on_logged_out)

    @property
    def current_path(self) -> Optional[str]:
        return self._current_path

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def register(self, pattern: str, factory: PageFactory):
        """注册路由；pattern 可包含 {name} 形式的参数，如 /articles/{id}"""
        self._routes.append(_Route(pattern, _compile(pattern), factory))
        self.logger.debug(f"Route registered: {pattern}")

    def resolve(self, path: str):
        """返回 (route, params)；无匹配时返回 (None, {})"""
        path = normalize_path(path)
        for route in self._routes:
            match = route.regex.match(path)
            if match:
                return route, match.groupdict()
        return None, {}

    def _request_cookies(self) -> Dict[str, str]:
        cookie = self._session.cookie()
        return {TOKEN_COOKIE_NAME: cookie.value} if cookie else {}

    @pyqtSlot(str)
    def navigate(self, path: str) -> Optional[str]:
        """
        导航到 path，跟随守卫的重定向。

        Returns:
            最终显示的路径；没有可用页面时返回 None。
        """
        target = path
        for _ in range(MAX_REDIRECTS):
            decision = self._guard.check_request(target, cookies=self._request_cookies())
            if decision.allowed:
                break
            self.logger.info(f"Navigation to '{target}' redirected to '{decision.redirect_to}' ({decision.reason})")
            self.navigation_blocked.emit(target, decision.redirect_to)
            target = decision.redirect_to
        else:
            self.logger.error(f"Too many redirects while navigating to '{path}'")
            return None

        route, params = self.resolve(target)
        if route is None:
            self.logger.warning(f"No page registered for '{target}', falling back to '{NOT_FOUND_PATH}'")
            if normalize_path(target) == NOT_FOUND_PATH:
                return None
            return self.navigate(NOT_FOUND_PATH)

        page = route.factory(params)
        self._current_path = normalize_path(target)
        self._history.append(self._current_path)
        self.logger.info(f"Navigated to '{self._current_path}'")
        self.page_changed.emit(self._current_path, page)
        return self._current_path

    @pyqtSlot()
    def reload(self):
        if self._current_path:
            self.navigate(self._current_path)

    @pyqtSlot()
    def _on_logged_out(self):
        self.navigate("/login")
