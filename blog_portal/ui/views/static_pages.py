from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton

from blog_portal.core.session_service import SessionService
from blog_portal.ui.views.base_page import BasePage


class HomePage(BasePage):
    """首页: 根据会话状态给出入口"""

    def __init__(self, session: SessionService, parent=None):
        super().__init__("Blog Portal", parent=parent)
        self._session = session

        intro = QLabel("Read the latest articles from our writers, or sign in to manage content.")
        intro.setWordWrap(True)
        self.main_layout.addWidget(intro)

        buttons = QHBoxLayout()
        user = session.current()
        if user is None:
            self._add_button(buttons, "Login", "/login")
            self._add_button(buttons, "Register", "/register")
        else:
            self._add_button(buttons, "Browse Articles", "/articles")
            if session.is_admin():
                self._add_button(buttons, "Admin Dashboard", "/admin/articles")
        buttons.addStretch(1)
        self.main_layout.addLayout(buttons)
        self.main_layout.addStretch(1)

    def _add_button(self, layout, text: str, path: str):
        button = QPushButton(text)
        button.clicked.connect(lambda: self.navigate_requested.emit(path))
        layout.addWidget(button)


class UnauthorizedPage(BasePage):
    """角色不足时的提示页"""

    def __init__(self, parent=None):
        super().__init__("Unauthorized", parent=parent)
        message = QLabel("You don't have permission to access this page.")
        message.setAlignment(Qt.AlignCenter)
        self.main_layout.addWidget(message)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        home_button = QPushButton("Go to Home")
        home_button.clicked.connect(lambda: self.navigate_requested.emit("/"))
        login_button = QPushButton("Login")
        login_button.clicked.connect(lambda: self.navigate_requested.emit("/login"))
        buttons.addWidget(home_button)
        buttons.addWidget(login_button)
        buttons.addStretch(1)
        self.main_layout.addLayout(buttons)
        self.main_layout.addStretch(1)
