"""依赖注入容器定义"""

from dependency_injector import containers, providers
from PySide6.QtCore import QSettings

from blog_portal.core.article_service import ArticleService, CategoryService
from blog_portal.core.auth_service import AuthService
from blog_portal.core.route_guard import RouteGuard
from blog_portal.core.session_service import SessionService
from blog_portal.core.upload_service import UploadService
from blog_portal.storage.session_storage import SessionStorage
from blog_portal.ui.router import Router
from blog_portal.ui.viewmodels.article_detail_viewmodel import ArticleDetailViewModel
from blog_portal.ui.viewmodels.auth_viewmodels import LoginViewModel, RegisterViewModel
from blog_portal.ui.viewmodels.form_viewmodels import ArticleFormViewModel, CategoryFormViewModel
from blog_portal.ui.viewmodels.list_viewmodel import article_list_viewmodel, category_list_viewmodel
from blog_portal.utils.api_client import ApiClient


class Container(containers.DeclarativeContainer):
    """应用程序依赖注入容器"""

    # --- 配置 ---
    # 由 blog_portal.config.settings.apply_config 填充
    config = providers.Configuration()

    # --- 会话 ---
    qsettings = providers.Singleton(
        QSettings,
        config.settings.organization,
        config.settings.application,
    )

    session_storage = providers.Singleton(SessionStorage, settings=qsettings)

    # 会话对象显式注入给需要它的 ViewModel 与路由
    session_service = providers.Singleton(SessionService, storage=session_storage)

    route_guard = providers.Singleton(RouteGuard)

    # --- 网络与服务 ---
    api_client = providers.Singleton(
        ApiClient,
        base_url=config.api.base_url,
        timeout=config.api.timeout,
    )

    auth_service = providers.Singleton(AuthService, api_client=api_client)
    article_service = providers.Singleton(ArticleService, api_client=api_client)
    category_service = providers.Singleton(CategoryService, api_client=api_client)
    upload_service = providers.Singleton(
        UploadService,
        api_client=api_client,
        upload_url=config.api.upload_url,
    )

    router = providers.Singleton(Router, guard=route_guard, session=session_service)

    # --- ViewModels: 每个页面实例一个 ---
    articles_viewmodel = providers.Factory(
        article_list_viewmodel,
        article_service=article_service,
        page_size=config.ui.public_page_size,
        debounce_ms=config.ui.search_debounce_ms,
    )

    admin_articles_viewmodel = providers.Factory(
        article_list_viewmodel,
        article_service=article_service,
        page_size=config.ui.admin_page_size,
        debounce_ms=config.ui.search_debounce_ms,
    )

    admin_categories_viewmodel = providers.Factory(
        category_list_viewmodel,
        category_service=category_service,
        page_size=config.ui.admin_page_size,
        debounce_ms=config.ui.search_debounce_ms,
    )

    article_detail_viewmodel = providers.Factory(ArticleDetailViewModel, article_service=article_service)

    login_viewmodel = providers.Factory(
        LoginViewModel,
        auth_service=auth_service,
        session=session_service,
    )

    register_viewmodel = providers.Factory(
        RegisterViewModel,
        auth_service=auth_service,
        redirect_ms=config.ui.register_redirect_ms,
    )

    article_form_viewmodel = providers.Factory(
        ArticleFormViewModel,
        article_service=article_service,
        category_service=category_service,
        upload_service=upload_service,
        session=session_service,
        redirect_ms=config.ui.article_redirect_ms,
    )

    category_form_viewmodel = providers.Factory(
        CategoryFormViewModel,
        category_service=category_service,
        redirect_ms=config.ui.category_redirect_ms,
    )


def bind_session_to_api_client(session: SessionService, api_client: ApiClient):
    """会话变化时，把派生的 token cookie 同步到 ApiClient"""
    def _sync(_user=None):
        api_client.apply_session_cookie(session.cookie())

    session.session_changed.connect(_sync)
    _sync()
