"""
登录与注册页面的 ViewModel
"""

from typing import Optional

from PySide6.QtCore import QObject, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.auth_service import AuthService, LoginResult, REGISTER_GENERIC_ERROR
from blog_portal.core.exception import ApiError
from blog_portal.core.session_service import SessionService
from blog_portal.core.validation import LOGIN_RULES, REGISTER_RULES
from blog_portal.models import Role
from blog_portal.ui.viewmodels.base_viewmodel import FormViewModel

ADMIN_HOME = "/admin/articles"
USER_HOME = "/articles"
LOGIN_ROUTE = "/login"

DEFAULT_REGISTER_REDIRECT_MS = 2000
LOGIN_GENERIC_ERROR = "Login failed. Please try again."


class LoginViewModel(FormViewModel):
    """登录表单"""

    logged_in = pyqtSignal(object)  # User 或 None

    def __init__(self, auth_service: AuthService, session: SessionService,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._auth_service = auth_service
        self._session = session

    @pyqtSlot(str, str)
    def submit(self, identifier: str, password: str):
        self.clear_error()
        if not self.validate_fields({"identifier": identifier, "password": password}, LOGIN_RULES):
            return
        if self.is_busy:
            self.logger.debug("Login already in progress, ignoring submit.")
            return
        self.logger.info(f"Submitting login for '{identifier.strip()}'")
        self.start_request(
            "login",
            lambda flag: self._auth_service.login(identifier, password, cancel_flag=flag),
            self._on_login_succeeded,
            self._on_login_failed,
        )

    def _on_login_succeeded(self, result: LoginResult):
        user = self._session.login(result.token, result.role, result.username)
        role = Role.parse(result.role) or (user.role if user else None)
        target = ADMIN_HOME if role is Role.ADMIN else USER_HOME
        self.logger.info(f"Login complete, redirecting to {target}")
        self.logged_in.emit(user)
        self.navigate_requested.emit(target)

    def _on_login_failed(self, error: Exception):
        self.set_error(error.message if isinstance(error, ApiError) else LOGIN_GENERIC_ERROR)


class RegisterViewModel(FormViewModel):
    """注册表单；成功后延迟跳转到登录页"""

    registered = pyqtSignal()

    def __init__(self, auth_service: AuthService,
                 redirect_ms: int = DEFAULT_REGISTER_REDIRECT_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._auth_service = auth_service
        self._redirect_ms = redirect_ms
        self._succeeded = False

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    @pyqtSlot(str, str, str, str)
    def submit(self, username: str, email: str, password: str, role: str):
        self.clear_error()
        data = {"username": username, "email": email, "password": password, "role": role}
        if not self.validate_fields(data, REGISTER_RULES):
            return
        if self.is_busy:
            return
        self.start_request(
            "register",
            lambda flag: self._auth_service.register(username, email, password, role, cancel_flag=flag),
            self._on_registered,
            self._on_register_failed,
        )

    def _on_registered(self, _result):
        self._succeeded = True
        self.registered.emit()
        self.navigate_later(LOGIN_ROUTE, self._redirect_ms)

    def _on_register_failed(self, error: Exception):
        self.set_error(error.message if isinstance(error, ApiError) else REGISTER_GENERIC_ERROR)
