"""
登录页与注册页
"""

from typing import Dict

from PySide6.QtWidgets import QComboBox, QFormLayout, QLabel, QLineEdit, QPushButton

from blog_portal.models import Role
from blog_portal.ui.viewmodels.auth_viewmodels import LoginViewModel, RegisterViewModel
from blog_portal.ui.views.base_page import BasePage

_ERROR_STYLE = "color: #b42318; font-size: 11px;"


def error_label() -> QLabel:
    label = QLabel()
    label.setStyleSheet(_ERROR_STYLE)
    label.setVisible(False)
    return label


def show_field_errors(labels: Dict[str, QLabel], errors: Dict[str, str]):
    for name, label in labels.items():
        message = errors.get(name, "")
        label.setText(message)
        label.setVisible(bool(message))


class LoginPage(BasePage):
    def __init__(self, viewmodel: LoginViewModel, parent=None):
        super().__init__("Login", viewmodel, parent)
        form = QFormLayout()
        self.identifier_edit = QLineEdit()
        self.identifier_edit.setPlaceholderText("Username")
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        self._errors = {"identifier": error_label(), "password": error_label()}

        form.addRow("Username", self.identifier_edit)
        form.addRow("", self._errors["identifier"])
        form.addRow("Password", self.password_edit)
        form.addRow("", self._errors["password"])
        self.main_layout.addLayout(form)

        self.submit_button = QPushButton("Login")
        self.submit_button.clicked.connect(self._on_submit)
        self.password_edit.returnPressed.connect(self._on_submit)
        self.main_layout.addWidget(self.submit_button)

        register_link = QPushButton("Don't have an account? Register")
        register_link.setFlat(True)
        register_link.clicked.connect(lambda: self.navigate_requested.emit("/register"))
        self.main_layout.addWidget(register_link)
        self.main_layout.addStretch(1)

        viewmodel.field_errors_changed.connect(lambda errors: show_field_errors(self._errors, errors))
        viewmodel.busy_changed.connect(self._on_busy)

    def _on_busy(self, busy: bool):
        self.submit_button.setEnabled(not busy)
        self.submit_button.setText("Signing in..." if busy else "Login")

    def _on_submit(self):
        self.viewmodel.submit(self.identifier_edit.text(), self.password_edit.text())


class RegisterPage(BasePage):
    def __init__(self, viewmodel: RegisterViewModel, parent=None):
        super().__init__("Register", viewmodel, parent)
        form = QFormLayout()
        self.username_edit = QLineEdit()
        self.email_edit = QLineEdit()
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        self.role_combo = QComboBox()
        self.role_combo.addItem("Select role", "")
        for role in Role:
            self.role_combo.addItem(role.value, role.value)
        self._errors = {name: error_label() for name in ("username", "email", "password", "role")}

        form.addRow("Username", self.username_edit)
        form.addRow("", self._errors["username"])
        form.addRow("Email", self.email_edit)
        form.addRow("", self._errors["email"])
        form.addRow("Password", self.password_edit)
        form.addRow("", self._errors["password"])
        form.addRow("Role", self.role_combo)
        form.addRow("", self._errors["role"])
        self.main_layout.addLayout(form)

        self.success_label = QLabel("Registration successful! Redirecting to login...")
        self.success_label.setStyleSheet("color: #067647;")
        self.success_label.setVisible(False)
        self.main_layout.addWidget(self.success_label)

        self.submit_button = QPushButton("Register")
        self.submit_button.clicked.connect(self._on_submit)
        self.main_layout.addWidget(self.submit_button)

        login_link = QPushButton("Already have an account? Login")
        login_link.setFlat(True)
        login_link.clicked.connect(lambda: self.navigate_requested.emit("/login"))
        self.main_layout.addWidget(login_link)
        self.main_layout.addStretch(1)

        viewmodel.field_errors_changed.connect(lambda errors: show_field_errors(self._errors, errors))
        viewmodel.busy_changed.connect(lambda busy: self.submit_button.setEnabled(not busy))
        viewmodel.registered.connect(self._on_registered)

    def _on_registered(self):
        self.success_label.setVisible(True)
        self.submit_button.setEnabled(False)

    def _on_submit(self):
        self.viewmodel.submit(self.username_edit.text(), self.email_edit.text(),
                              self.password_edit.text(), self.role_combo.currentData() or "")
