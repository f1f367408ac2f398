#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
主窗口模块

QStackedWidget 承载当前路由页面；页面切换时销毁旧页面 (取消其进行中的请求)。
"""

import logging
from typing import Dict, Optional

from PySide6.QtCore import QSettings, Slot as pyqtSlot
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QLabel, QMainWindow, QSizePolicy, QStackedWidget, QToolBar, QWidget

from blog_portal.containers import Container
from blog_portal.models import User
from blog_portal.ui.views.admin_pages import (AdminArticlesPage, AdminCategoriesPage,
                                              CreateArticlePage, CreateCategoryPage)
from blog_portal.ui.views.article_pages import ArticleDetailPage, ArticlesPage
from blog_portal.ui.views.auth_pages import LoginPage, RegisterPage
from blog_portal.ui.views.base_page import BasePage
from blog_portal.ui.views.static_pages import HomePage, UnauthorizedPage

WINDOW_TITLE = "Blog Portal"


def register_routes(router, container: Container):
    """路径 -> 页面工厂。每个页面获得新的 ViewModel 实例"""
    session = container.session_service()
    router.register("/", lambda params: HomePage(session))
    router.register("/login", lambda params: LoginPage(container.login_viewmodel()))
    router.register("/register", lambda params: RegisterPage(container.register_viewmodel()))
    router.register("/unauthorized", lambda params: UnauthorizedPage())
    router.register("/articles", lambda params: ArticlesPage(container.articles_viewmodel()))
    router.register("/articles/{id}",
                    lambda params: ArticleDetailPage(container.article_detail_viewmodel(), params["id"]))
    router.register("/admin/articles", lambda params: AdminArticlesPage(container.admin_articles_viewmodel()))
    router.register("/admin/articles/create",
                    lambda params: CreateArticlePage(container.article_form_viewmodel()))
    router.register("/admin/categories",
                    lambda params: AdminCategoriesPage(container.admin_categories_viewmodel()))
    router.register("/admin/categories/create",
                    lambda params: CreateCategoryPage(container.category_form_viewmodel()))


class MainWindow(QMainWindow):
    """应用程序主窗口"""

    def __init__(self, container: Container, settings: Optional[QSettings] = None):
        super().__init__()
        self.logger = logging.getLogger('blog_portal.ui.views.main_window')
        self.container = container
        self.settings = settings
        self.session = container.session_service()
        self.router = container.router()
        self._page: Optional[BasePage] = None

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1200, 800)

        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)
        self._init_toolbar()

        register_routes(self.router, container)
        self.router.page_changed.connect(self._show_page)
        self.session.session_changed.connect(self._on_session_changed)
        self._on_session_changed(self.session.current())

        if settings is not None and settings.contains("window/geometry"):
            self.restoreGeometry(settings.value("window/geometry"))
        self.logger.info("MainWindow initialized.")

    def _init_toolbar(self):
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._actions: Dict[str, QAction] = {}
        for text, path in (("Home", "/"), ("Articles", "/articles"),
                           ("Manage Articles", "/admin/articles"), ("Manage Categories", "/admin/categories"),
                           ("Login", "/login"), ("Register", "/register")):
            action = QAction(text, self)
            action.triggered.connect(lambda _checked=False, p=path: self.router.navigate(p))
            toolbar.addAction(action)
            self._actions[path] = action

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)
        self.user_label = QLabel()
        toolbar.addWidget(self.user_label)
        self.logout_action = QAction("Logout", self)
        self.logout_action.triggered.connect(self.session.logout)
        toolbar.addAction(self.logout_action)

    @pyqtSlot(object)
    def _on_session_changed(self, user: Optional[User]):
        logged_in = user is not None
        is_admin = self.session.is_admin()
        self.user_label.setText(f"{user.username} ({user.role.value})  " if logged_in else "")
        self._actions["/articles"].setVisible(logged_in)
        self._actions["/admin/articles"].setVisible(is_admin)
        self._actions["/admin/categories"].setVisible(is_admin)
        self._actions["/login"].setVisible(not logged_in)
        self._actions["/register"].setVisible(not logged_in)
        self.logout_action.setVisible(logged_in)

    @pyqtSlot(str, object)
    def _show_page(self, path: str, page: BasePage):
        previous = self._page
        self._page = page
        page.navigate_requested.connect(self.router.navigate)
        self.stack.addWidget(page)
        self.stack.setCurrentWidget(page)
        self.setWindowTitle(f"{WINDOW_TITLE} - {path}")
        if previous is not None:
            previous.dispose()
            self.stack.removeWidget(previous)
            previous.deleteLater()
        page.activate()

    @property
    def current_page(self) -> Optional[BasePage]:
        return self._page

    def closeEvent(self, event):
        if self._page is not None:
            self._page.dispose()
        if self.settings is not None:
            self.settings.setValue("window/geometry", self.saveGeometry())
        self.logger.info("MainWindow closing.")
        super().closeEvent(event)
