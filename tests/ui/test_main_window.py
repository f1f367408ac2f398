import pytest
from unittest.mock import MagicMock

from dependency_injector import providers

from blog_portal.config.settings import apply_config
from blog_portal.containers import Container
from blog_portal.ui.views.admin_pages import AdminArticlesPage
from blog_portal.ui.views.auth_pages import LoginPage
from blog_portal.ui.views.main_window import MainWindow
from blog_portal.ui.views.static_pages import HomePage, UnauthorizedPage


@pytest.fixture
def article_service(make_articles):
    service = MagicMock()
    service.get_articles.return_value = make_articles(12)
    return service


@pytest.fixture
def window(qtbot, qsettings, article_service):
    container = Container()
    apply_config(container.config, environ={})
    container.qsettings.override(providers.Object(qsettings))
    container.article_service.override(providers.Object(article_service))
    window = MainWindow(container)
    qtbot.addWidget(window)
    yield window
    container.article_service.reset_override()
    container.qsettings.reset_override()


def test_start_page_is_home(window):
    window.router.navigate("/")
    assert isinstance(window.current_page, HomePage)
    assert not window.logout_action.isVisible()


def test_protected_page_requires_login(window):
    window.router.navigate("/admin/articles")
    assert isinstance(window.current_page, LoginPage)
    assert window.router.current_path == "/login"


def test_admin_page_loads_articles(window, article_service, make_token, qtbot):
    window.session.login(make_token(userId=1))
    window.router.navigate("/admin/articles")
    page = window.current_page
    assert isinstance(page, AdminArticlesPage)
    qtbot.waitUntil(lambda: page.table.rowCount() == 10, timeout=3000)
    assert page.total_label.text() == "Total articles: 12"
    article_service.get_articles.assert_called_once()


def test_user_role_sees_unauthorized_and_old_page_is_disposed(window, make_token):
    window.session.login(make_token(userId=5, role="User"))
    window.router.navigate("/")
    home = window.current_page
    window.router.navigate("/admin/categories")
    assert isinstance(window.current_page, UnauthorizedPage)
    assert window.stack.indexOf(home) == -1


def test_logout_returns_to_login(window, make_token):
    window.session.login(make_token(userId=1))
    window.router.navigate("/")
    window.session.logout()
    assert isinstance(window.current_page, LoginPage)
