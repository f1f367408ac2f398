"""
公共文章页面: 文章网格与文章详情
"""

from typing import List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QFrame, QGridLayout, QLabel, QPushButton, QScrollArea,
                               QTextBrowser, QVBoxLayout, QWidget)

from blog_portal.models import Article
from blog_portal.ui.components.pagination_bar import PaginationBar
from blog_portal.ui.components.search_filters import SearchFilters
from blog_portal.ui.viewmodels.article_detail_viewmodel import ArticleDetailViewModel
from blog_portal.ui.viewmodels.list_viewmodel import ListViewModel
from blog_portal.ui.views.base_page import BasePage
from blog_portal.utils.date_utils import format_date_long
from blog_portal.utils.text_utils import content_to_html, excerpt

GRID_COLUMNS = 3


class ArticleCard(QFrame):
    """网格中的单篇文章卡片"""

    def __init__(self, article: Article, on_open, parent=None):
        super().__init__(parent)
        self.setFrameShape(QFrame.StyledPanel)
        layout = QVBoxLayout(self)

        category = QLabel(article.category)
        category.setStyleSheet("color: #2563eb; font-size: 11px;")
        title = QLabel(article.title)
        title.setWordWrap(True)
        title.setStyleSheet("font-weight: bold; font-size: 15px;")
        summary = QLabel(excerpt(article.content, 100))
        summary.setWordWrap(True)
        meta = QLabel(f"{article.author} · {format_date_long(article.date)}")
        meta.setStyleSheet("color: #667085; font-size: 11px;")
        read_more = QPushButton("Read more")
        read_more.clicked.connect(lambda: on_open(article.id))

        for widget in (category, title, summary, meta, read_more):
            layout.addWidget(widget)


class ArticlesPage(BasePage):
    """文章网格 (每页 9 篇)"""

    def __init__(self, viewmodel: ListViewModel, parent=None):
        super().__init__("Articles", viewmodel, parent)
        self.filters = SearchFilters("Search articles...", with_categories=True)
        self.filters.search_text_changed.connect(viewmodel.set_search_text)
        self.filters.search_submitted.connect(viewmodel.flush_search)
        self.filters.category_changed.connect(viewmodel.set_category)
        self.main_layout.addWidget(self.filters)

        self.summary_label = QLabel()
        self.main_layout.addWidget(self.summary_label)

        self._grid_host = QWidget()
        self._grid = QGridLayout(self._grid_host)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._grid_host)
        self.main_layout.addWidget(scroll, 1)

        self.empty_label = QLabel("No articles found.")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setVisible(False)
        self.main_layout.addWidget(self.empty_label)

        self.pagination = PaginationBar()
        self.pagination.page_requested.connect(viewmodel.set_page)
        self.pagination.previous_requested.connect(viewmodel.previous_page)
        self.pagination.next_requested.connect(viewmodel.next_page)
        self.main_layout.addWidget(self.pagination)

        viewmodel.facets_changed.connect(self.filters.set_facets)
        viewmodel.list_changed.connect(self._render)

    def activate(self):
        self.viewmodel.load()

    def _open_article(self, article_id: str):
        self.navigate_requested.emit(f"/articles/{article_id}")

    def _clear_grid(self):
        while self._grid.count():
            item = self._grid.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

    def _render(self):
        vm = self.viewmodel
        self._clear_grid()
        articles: List[Article] = vm.visible
        for index, article in enumerate(articles):
            self._grid.addWidget(ArticleCard(article, self._open_article),
                                 index // GRID_COLUMNS, index % GRID_COLUMNS)
        self.summary_label.setText(f"Showing {len(articles)} of {vm.filtered_count} articles")
        self.empty_label.setVisible(vm.loaded and vm.filtered_count == 0)
        self.pagination.update_state(vm.current_page, vm.total_pages)


class ArticleDetailPage(BasePage):
    """文章详情与相关文章"""

    def __init__(self, viewmodel: ArticleDetailViewModel, article_id: str, parent=None):
        super().__init__("", viewmodel, parent)
        self._article_id = article_id

        back = QPushButton("← Back to articles")
        back.setFlat(True)
        back.clicked.connect(lambda: self.navigate_requested.emit("/articles"))
        self.main_layout.insertWidget(0, back)

        self.meta_label = QLabel()
        self.meta_label.setStyleSheet("color: #667085;")
        self.main_layout.addWidget(self.meta_label)

        self.body = QTextBrowser()
        self.body.setOpenExternalLinks(True)
        self.main_layout.addWidget(self.body, 1)

        self.related_header = QLabel("Related Articles")
        self.related_header.setStyleSheet("font-weight: bold;")
        self.related_header.setVisible(False)
        self.main_layout.addWidget(self.related_header)
        self._related_layout = QVBoxLayout()
        self.main_layout.addLayout(self._related_layout)

        viewmodel.article_loaded.connect(self._render_article)
        viewmodel.related_loaded.connect(self._render_related)
        viewmodel.not_found.connect(self._render_not_found)

    def activate(self):
        self.viewmodel.load(self._article_id)

    def _render_article(self, article: Article):
        vm = self.viewmodel
        self.title_label.setText(article.title)
        self.meta_label.setText(f"{article.category} · {article.author} · {vm.formatted_date} · "
                                f"{vm.reading_time} min read")
        self.body.setHtml(content_to_html(article.content))

    def _render_related(self, related: List[Article]):
        self.related_header.setVisible(bool(related))
        for article in related:
            button = QPushButton(f"{article.title}\n{ArticleDetailViewModel.related_excerpt(article)}")
            button.setStyleSheet("text-align: left;")
            button.clicked.connect(lambda _checked=False, a=article: self.navigate_requested.emit(f"/articles/{a.id}"))
            self._related_layout.addWidget(button)

    def _render_not_found(self, message: str):
        self.title_label.setText(message)
        self.meta_label.clear()
        self.body.setVisible(False)
