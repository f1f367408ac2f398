"""文章详情 ViewModel"""

from typing import List, Optional

from PySide6.QtCore import QObject, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.article_service import ArticleService
from blog_portal.models import Article
from blog_portal.ui.viewmodels.base_viewmodel import BaseViewModel
from blog_portal.utils.date_utils import format_date_long
from blog_portal.utils.text_utils import excerpt, reading_time_minutes

ARTICLE_NOT_FOUND = "Article not found"
ARTICLE_LOAD_ERROR = "Failed to load article. Please try again later."


class ArticleDetailViewModel(BaseViewModel):
    """
    文章详情的 ViewModel。

    按 id 在文章集合中查找，并附带同分类的相关文章。
    """

    article_loaded = pyqtSignal(object)   # Article
    related_loaded = pyqtSignal(list)     # List[Article]
    not_found = pyqtSignal(str)

    def __init__(self, article_service: ArticleService, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._article_service = article_service
        self._article: Optional[Article] = None
        self._related: List[Article] = []
        self._article_id: Optional[str] = None
        self._is_not_found = False

    @property
    def article(self) -> Optional[Article]:
        return self._article

    @property
    def related(self) -> List[Article]:
        return list(self._related)

    @property
    def is_not_found(self) -> bool:
        return self._is_not_found

    @property
    def reading_time(self) -> int:
        return reading_time_minutes(self._article.content) if self._article else 0

    @property
    def formatted_date(self) -> str:
        return format_date_long(self._article.date) if self._article else ""

    @staticmethod
    def related_excerpt(article: Article) -> str:
        return excerpt(article.content, 100)

    @pyqtSlot(str)
    def load(self, article_id: str):
        self._article_id = str(article_id)
        self._is_not_found = False
        self.clear_error()
        self.logger.info(f"Loading article '{self._article_id}'")
        self.start_request(
            f"article:{self._article_id}",
            lambda flag: self._article_service.get_article_with_related(self._article_id, cancel_flag=flag),
            self._on_loaded,
            self._on_failed,
        )

    def _on_loaded(self, result):
        article, related = result
        if article is None:
            self._is_not_found = True
            self.logger.info(f"Article '{self._article_id}' not found.")
            self.not_found.emit(ARTICLE_NOT_FOUND)
            return
        self._article = article
        self._related = list(related)
        self.article_loaded.emit(article)
        self.related_loaded.emit(self.related)

    def _on_failed(self, error: Exception):
        self.set_error(ARTICLE_LOAD_ERROR)
