"""
管理端表单 ViewModel: 新建文章 (含图片上传与预览) 与新建分类
"""

from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.article_service import ArticleService, CategoryService
from blog_portal.core.exception import ApiError
from blog_portal.core.session_service import SessionService
from blog_portal.core.upload_service import UploadService, validate_image_file
from blog_portal.core.validation import ARTICLE_RULES, CATEGORY_RULES
from blog_portal.models import ArticleDraft, Category, CategoryDraft, UNKNOWN_AUTHOR
from blog_portal.ui.viewmodels.base_viewmodel import FormViewModel
from blog_portal.utils.text_utils import content_to_html, preview_read_time

ADMIN_ARTICLES_ROUTE = "/admin/articles"
ADMIN_CATEGORIES_ROUTE = "/admin/categories"
UNAUTHORIZED_ROUTE = "/unauthorized"

DEFAULT_ARTICLE_REDIRECT_MS = 2000
DEFAULT_CATEGORY_REDIRECT_MS = 1500

CREATE_ARTICLE_ERROR = "Failed to create article. Please try again."
CREATE_CATEGORY_ERROR = "Failed to create category. Please try again."
UPLOAD_ERROR = "Failed to upload image. Please try again."


class ArticleFormViewModel(FormViewModel):
    """
    新建文章表单。

    图片在选择后立即校验并上传，提交时只携带上传得到的 URL。
    """

    categories_loaded = pyqtSignal(list)
    upload_state_changed = pyqtSignal(bool)
    image_uploaded = pyqtSignal(str)
    image_error = pyqtSignal(str)
    preview_ready = pyqtSignal(dict)
    submitted = pyqtSignal()

    def __init__(self, article_service: ArticleService, category_service: CategoryService,
                 upload_service: UploadService, session: SessionService,
                 redirect_ms: int = DEFAULT_ARTICLE_REDIRECT_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._article_service = article_service
        self._category_service = category_service
        self._upload_service = upload_service
        self._session = session
        self._redirect_ms = redirect_ms
        self._categories: List[Category] = []
        self._image_url = ""
        self._uploading = False
        self._succeeded = False

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    @property
    def image_url(self) -> str:
        return self._image_url

    @property
    def is_uploading(self) -> bool:
        return self._uploading

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    def ensure_admin(self) -> bool:
        """非管理员用户跳转到未授权页"""
        if self._session.is_admin():
            return True
        self.logger.warning("Non-admin session opened the article form, redirecting.")
        self.navigate_requested.emit(UNAUTHORIZED_ROUTE)
        return False

    # --- 分类 ---
    @pyqtSlot()
    def load_categories(self):
        self.start_request("categories", self._category_service.get_categories,
                           self._on_categories_loaded, self._on_categories_failed)

    def _on_categories_loaded(self, categories: List[Category]):
        self._categories = list(categories)
        self.categories_loaded.emit(self.categories)

    def _on_categories_failed(self, error: Exception):
        # 分类加载失败时表单仍可用，只是下拉框为空
        self.logger.warning(f"Categories unavailable for article form: {error}")
        self._categories = []
        self.categories_loaded.emit([])

    def category_name(self, category_id: str) -> str:
        match = next((c for c in self._categories if c.id == str(category_id)), None)
        return match.name if match else ""

    # --- 图片 ---
    @pyqtSlot(str)
    def select_image(self, file_path: str):
        error = validate_image_file(file_path)
        if error:
            self.image_error.emit(error)
            return
        self._set_uploading(True)
        self.start_request(
            "upload",
            lambda flag: self._upload_service.upload_image(file_path, cancel_flag=flag),
            self._on_image_uploaded,
            self._on_upload_failed,
        )

    def _set_uploading(self, uploading: bool):
        self._uploading = uploading
        self.upload_state_changed.emit(uploading)

    def _on_image_uploaded(self, url: str):
        self._set_uploading(False)
        self._image_url = url
        self.image_uploaded.emit(url)

    def _on_upload_failed(self, error: Exception):
        self._set_uploading(False)
        self.image_error.emit(error.message if isinstance(error, ApiError) else UPLOAD_ERROR)

    @pyqtSlot()
    def remove_image(self):
        self._image_url = ""
        self.image_uploaded.emit("")

    # --- 预览 / 提交 ---
    def build_preview(self, title: str, content: str, excerpt: str,
                      category_id: str, tags: str = "") -> Dict[str, Any]:
        user = self._session.current()
        preview = {
            "title": title,
            "excerpt": excerpt,
            "content_html": content_to_html(content),
            "category": self.category_name(category_id),
            "author": user.username if user else UNKNOWN_AUTHOR,
            "read_time": preview_read_time(content),
            "tags": [t.strip() for t in tags.split(",") if t.strip()],
            "image_url": self._image_url,
        }
        self.preview_ready.emit(preview)
        return preview

    @pyqtSlot(str, str, str, str, str)
    def submit(self, title: str, content: str, excerpt: str, category_id: str, tags: str = ""):
        self.clear_error()
        data = {"title": title, "content": content, "excerpt": excerpt, "category": category_id}
        if not self.validate_fields(data, ARTICLE_RULES):
            return
        if self.is_busy:
            self.logger.debug("Request in progress, ignoring submit.")
            return
        draft = ArticleDraft(title=title, content=content, excerpt=excerpt,
                             category=category_id, image=self._image_url, tags=tags)
        self.start_request(
            "create-article",
            lambda flag: self._article_service.create_article(draft, cancel_flag=flag),
            self._on_created,
            self._on_create_failed,
        )

    def _on_created(self, _result):
        self._succeeded = True
        self.submitted.emit()
        self.navigate_later(ADMIN_ARTICLES_ROUTE, self._redirect_ms)

    def _on_create_failed(self, error: Exception):
        self.set_error(error.message if isinstance(error, ApiError) else CREATE_ARTICLE_ERROR)


class CategoryFormViewModel(FormViewModel):
    """新建分类表单"""

    submitted = pyqtSignal()

    def __init__(self, category_service: CategoryService,
                 redirect_ms: int = DEFAULT_CATEGORY_REDIRECT_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._category_service = category_service
        self._redirect_ms = redirect_ms
        self._succeeded = False

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    @pyqtSlot(str, str)
    def submit(self, name: str, description: str = ""):
        self.clear_error()
        if not self.validate_fields({"name": name, "description": description}, CATEGORY_RULES):
            return
        if self.is_busy:
            return
        draft = CategoryDraft(name=name, description=description)
        self.start_request(
            "create-category",
            lambda flag: self._category_service.create_category(draft, cancel_flag=flag),
            self._on_created,
            self._on_create_failed,
        )

    def _on_created(self, _result):
        self._succeeded = True
        self.submitted.emit()
        self.navigate_later(ADMIN_CATEGORIES_ROUTE, self._redirect_ms)

    def _on_create_failed(self, error: Exception):
        self.set_error(error.message if isinstance(error, ApiError) else CREATE_CATEGORY_ERROR)
