"""
通用列表控制器: 文本搜索 + 分类筛选 + 分页。

同一个状态机被公共文章网格、管理端文章表格和管理端分类表格复用，
只是文本字段、分类选择器与每页数量不同。
"""

import logging
import math
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from blog_portal.models import Facet

T = TypeVar("T")

ALL_CATEGORIES = "all"

FieldGetter = Callable[[Any], Optional[str]]


def _getter(field: Any) -> FieldGetter:
    if callable(field):
        return field
    return lambda item: getattr(item, field, None)


class ListController(Generic[T]):
    """
    保存完整集合与三个独立输入 (搜索词、分类、页码)，同步计算可见页。

    Args:
        text_fields: 参与文本搜索的字段名或取值函数，任一字段命中即可。
        page_size: 每页条数。
        category_key: 分类字段名或取值函数；为 None 时不支持分类筛选与 facets。
        id_key: 条目 id 字段名或取值函数，用于 remove()。
    """

    def __init__(self, text_fields: Sequence[Any], page_size: int,
                 category_key: Any = None, id_key: Any = "id"):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.logger = logging.getLogger('blog_portal.core.list_controller')
        self._text_getters = [_getter(f) for f in text_fields]
        self._category_getter = _getter(category_key) if category_key is not None else None
        self._id_getter = _getter(id_key)
        self.page_size = page_size

        self._items: List[T] = []
        self._filtered: List[T] = []
        self._facets: List[Facet] = []
        self._search_term = ""
        self._category = ALL_CATEGORIES
        self._page = 1

    # --- 输入 ---
    def set_items(self, items: Sequence[T]):
        """替换完整集合；重新计算 facets，页码回到 1"""
        self._items = list(items)
        self._facets = self._compute_facets()
        self._refilter()

    def set_search_term(self, term: Optional[str]):
        """设置生效的搜索词 (防抖之后)；页码回到 1"""
        self._search_term = term or ""
        self._refilter()

    def set_category(self, category: Optional[str]):
        """设置分类筛选，'all' 或空表示不过滤；页码回到 1"""
        self._category = category or ALL_CATEGORIES
        self._refilter()

    def set_page(self, page: int) -> int:
        """跳转到指定页，超出范围时夹到 [1, 总页数]，从不抛出异常"""
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        self._page = max(1, min(page, self.max_page))
        return self._page

    def next_page(self) -> int:
        return self.set_page(self._page + 1)

    def previous_page(self) -> int:
        return self.set_page(self._page - 1)

    def remove(self, item_id: Any) -> bool:
        """从完整集合中移除指定 id 的条目 (本地删除)；返回是否有条目被移除"""
        remaining = [item for item in self._items if self._id_getter(item) != item_id]
        if len(remaining) == len(self._items):
            return False
        self.set_items(remaining)
        return True

    # --- 输出 ---
    @property
    def items(self) -> List[T]:
        return list(self._items)

    @property
    def filtered(self) -> List[T]:
        return list(self._filtered)

    @property
    def filtered_count(self) -> int:
        return len(self._filtered)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def category(self) -> str:
        return self._category

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        """ceil(过滤后数量 / 每页数量)，空集合时为 0"""
        return math.ceil(len(self._filtered) / self.page_size)

    @property
    def max_page(self) -> int:
        return max(1, self.total_pages)

    @property
    def visible(self) -> List[T]:
        start = (self._page - 1) * self.page_size
        return self._filtered[start:start + self.page_size]

    @property
    def facets(self) -> List[Facet]:
        return list(self._facets)

    @property
    def has_previous(self) -> bool:
        return self._page > 1

    @property
    def has_next(self) -> bool:
        return self._page < self.total_pages

    def page_numbers(self) -> List[int]:
        return list(range(1, self.total_pages + 1))

    # --- 内部 ---
    def _matches_text(self, item: T, needle: str) -> bool:
        for getter in self._text_getters:
            value = getter(item)
            if value and needle in str(value).lower():
                return True
        return False

    def _matches_category(self, item: T, wanted: str) -> bool:
        value = self._category_getter(item) if self._category_getter else None
        return value is not None and str(value).lower() == wanted

    def _refilter(self):
        result = self._items
        if self._search_term:
            needle = self._search_term.lower()
            result = [item for item in result if self._matches_text(item, needle)]
        if self._category_getter is not None and self._category.lower() != ALL_CATEGORIES:
            wanted = self._category.lower()
            result = [item for item in result if self._matches_category(item, wanted)]
        self._filtered = list(result)
        self._page = 1
        self.logger.debug(
            f"List refiltered: {len(self._filtered)}/{len(self._items)} items "
            f"(search='{self._search_term}', category='{self._category}')")

    def _compute_facets(self) -> List[Facet]:
        if self._category_getter is None:
            return []
        counts = {}
        for item in self._items:
            name = self._category_getter(item)
            if name is None:
                continue
            counts[name] = counts.get(name, 0) + 1
        return [Facet(name=name, count=count) for name, count in counts.items()]
