"""列表页 ViewModel: 防抖搜索、分类筛选与分页，三个列表页面共用"""

from typing import Any, Callable, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.article_service import ArticleService, CategoryService
from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.list_controller import ListController
from blog_portal.models import Facet
from blog_portal.ui.viewmodels.base_viewmodel import BaseViewModel

DEFAULT_DEBOUNCE_MS = 400

ARTICLES_LOAD_ERROR = "Failed to load articles. Please try again later."
CATEGORIES_LOAD_ERROR = "Failed to load categories. Please try again later."


class ListViewModel(BaseViewModel):
    """
    列表页面的 ViewModel。

    持有原始搜索框文本，并在 ListController 前面加一个单次触发的防抖定时器:
    每次按键都会重启定时器，安静 debounce_ms 之后才把文本作为生效的搜索词。
    分类与页码的变化立即生效。
    """

    # --- 信号 ---
    list_changed = pyqtSignal()          # 可见页、页码或总数发生变化
    search_applied = pyqtSignal(str)     # 防抖结束，生效的搜索词
    facets_changed = pyqtSignal(list)    # 分类计数 (List[Facet])
    items_loaded = pyqtSignal(int)       # 加载完成，完整集合的条目数

    def __init__(self, controller: ListController,
                 loader: Optional[Callable[[CancellationFlag], List[Any]]] = None,
                 debounce_ms: int = DEFAULT_DEBOUNCE_MS,
                 load_error_message: str = ARTICLES_LOAD_ERROR,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._controller = controller
        self._loader = loader
        self._load_error_message = load_error_message
        self._search_text = ""
        self._loaded = False

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(debounce_ms)
        self._debounce_timer.timeout.connect(self._apply_search)

    # --- 属性 ---
    @property
    def controller(self) -> ListController:
        return self._controller

    @property
    def search_text(self) -> str:
        """搜索框中的原始文本 (可能尚未生效)"""
        return self._search_text

    @property
    def search_term(self) -> str:
        """当前生效的搜索词"""
        return self._controller.search_term

    @property
    def category(self) -> str:
        return self._controller.category

    @property
    def visible(self) -> List[Any]:
        return self._controller.visible

    @property
    def current_page(self) -> int:
        return self._controller.current_page

    @property
    def total_pages(self) -> int:
        return self._controller.total_pages

    @property
    def total_count(self) -> int:
        return len(self._controller.items)

    @property
    def filtered_count(self) -> int:
        return self._controller.filtered_count

    @property
    def facets(self) -> List[Facet]:
        return self._controller.facets

    @property
    def has_previous(self) -> bool:
        return self._controller.has_previous

    @property
    def has_next(self) -> bool:
        return self._controller.has_next

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def is_search_pending(self) -> bool:
        return self._debounce_timer.isActive()

    # --- 加载 ---
    @pyqtSlot()
    def load(self):
        """通过 loader 在后台获取完整集合"""
        if self._loader is None:
            self.logger.warning("load() called but no loader configured.")
            return
        self.clear_error()
        self.start_request("load", self._loader, self.set_items, self._on_load_failed)

    def _on_load_failed(self, error: Exception):
        self._loaded = True
        self.set_error(self._load_error_message)
        self.list_changed.emit()

    def set_items(self, items: List[Any]):
        self._controller.set_items(items)
        self._loaded = True
        self.logger.info(f"List populated with {len(items)} items.")
        self.items_loaded.emit(len(items))
        self.facets_changed.emit(self._controller.facets)
        self.list_changed.emit()

    # --- 输入 ---
    @pyqtSlot(str)
    def set_search_text(self, text: str):
        """搜索框文本变化；重启防抖定时器"""
        self._search_text = text or ""
        self._debounce_timer.start()

    @pyqtSlot()
    def flush_search(self):
        """立即应用当前搜索文本 (例如按下回车)"""
        self._debounce_timer.stop()
        self._apply_search()

    @pyqtSlot()
    def _apply_search(self):
        # 生效词未变化时不重置页码
        term = self._search_text
        if term == self._controller.search_term:
            return
        self.logger.debug(f"Applying search term '{term}'")
        self._controller.set_search_term(term)
        self.search_applied.emit(term)
        self.list_changed.emit()

    @pyqtSlot(str)
    def set_category(self, category: str):
        self._controller.set_category(category)
        self.list_changed.emit()

    @pyqtSlot(int)
    def set_page(self, page: int):
        self._controller.set_page(page)
        self.list_changed.emit()

    @pyqtSlot()
    def next_page(self):
        self._controller.next_page()
        self.list_changed.emit()

    @pyqtSlot()
    def previous_page(self):
        self._controller.previous_page()
        self.list_changed.emit()

    def remove_item(self, item_id: Any) -> bool:
        """本地删除 (不调用服务端)"""
        removed = self._controller.remove(item_id)
        if removed:
            self.logger.info(f"Item '{item_id}' removed locally.")
            self.facets_changed.emit(self._controller.facets)
            self.list_changed.emit()
        return removed

    def page_numbers(self) -> List[int]:
        return self._controller.page_numbers()

    @pyqtSlot()
    def dispose(self):
        self._debounce_timer.stop()
        super().dispose()


def article_list_viewmodel(article_service: ArticleService, page_size: int,
                           debounce_ms: int = DEFAULT_DEBOUNCE_MS) -> ListViewModel:
    """文章列表: 搜索标题/内容/作者，按分类名筛选"""
    controller = ListController(text_fields=("title", "content", "author"),
                                page_size=page_size, category_key="category")
    return ListViewModel(controller, loader=article_service.get_articles,
                         debounce_ms=debounce_ms, load_error_message=ARTICLES_LOAD_ERROR)


def category_list_viewmodel(category_service: CategoryService, page_size: int,
                            debounce_ms: int = DEFAULT_DEBOUNCE_MS) -> ListViewModel:
    """分类列表: 搜索名称/描述，无分类筛选"""
    controller = ListController(text_fields=("name", "description"), page_size=page_size)
    return ListViewModel(controller, loader=category_service.get_categories,
                         debounce_ms=debounce_ms, load_error_message=CATEGORIES_LOAD_ERROR)
