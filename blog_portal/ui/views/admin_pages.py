"""
管理端页面: 文章表格、分类表格、新建文章、新建分类
"""

from typing import Any, Callable, List, Sequence, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QComboBox, QFileDialog, QFormLayout, QHBoxLayout, QHeaderView,
                               QLabel, QLineEdit, QMessageBox, QPushButton, QTableWidget,
                               QTableWidgetItem, QTextBrowser, QTextEdit)

from blog_portal.models import Category
from blog_portal.ui.components.pagination_bar import PaginationBar
from blog_portal.ui.components.search_filters import SearchFilters
from blog_portal.ui.viewmodels.form_viewmodels import ArticleFormViewModel, CategoryFormViewModel
from blog_portal.ui.viewmodels.list_viewmodel import ListViewModel
from blog_portal.ui.views.auth_pages import error_label, show_field_errors
from blog_portal.ui.views.base_page import BasePage
from blog_portal.utils.date_utils import format_date_short

Column = Tuple[str, Callable[[Any], str]]


class AdminListPage(BasePage):
    """
    管理端表格页面 (每页 10 条)。

    列由子类给出；最后一列是删除按钮，确认后只在本地移除。
    """

    columns: Sequence[Column] = ()
    item_label = "item"
    create_path = ""

    def __init__(self, title: str, viewmodel: ListViewModel, with_categories: bool, parent=None):
        super().__init__(title, viewmodel, parent)
        toolbar = QHBoxLayout()
        self.filters = SearchFilters(f"Search {self.item_label}s...", with_categories=with_categories)
        self.filters.search_text_changed.connect(viewmodel.set_search_text)
        self.filters.search_submitted.connect(viewmodel.flush_search)
        self.filters.category_changed.connect(viewmodel.set_category)
        toolbar.addWidget(self.filters, 1)
        add_button = QPushButton(f"+ Add {self.item_label.title()}")
        add_button.clicked.connect(lambda: self.navigate_requested.emit(self.create_path))
        toolbar.addWidget(add_button)
        self.main_layout.addLayout(toolbar)

        self.total_label = QLabel()
        self.main_layout.addWidget(self.total_label)

        self.table = QTableWidget(0, len(self.columns) + 1)
        self.table.setHorizontalHeaderLabels([name for name, _ in self.columns] + ["Actions"])
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.main_layout.addWidget(self.table, 1)

        self.pagination = PaginationBar()
        self.pagination.page_requested.connect(viewmodel.set_page)
        self.pagination.previous_requested.connect(viewmodel.previous_page)
        self.pagination.next_requested.connect(viewmodel.next_page)
        self.main_layout.addWidget(self.pagination)

        viewmodel.facets_changed.connect(self.filters.set_facets)
        viewmodel.list_changed.connect(self._render)

    def activate(self):
        self.viewmodel.load()

    def _render(self):
        vm = self.viewmodel
        rows: List[Any] = vm.visible
        self.table.setRowCount(len(rows))
        for row, item in enumerate(rows):
            for col, (_, getter) in enumerate(self.columns):
                cell = QTableWidgetItem(getter(item))
                cell.setData(Qt.UserRole, item.id)
                self.table.setItem(row, col, cell)
            delete_button = QPushButton("Delete")
            delete_button.clicked.connect(lambda _checked=False, i=item: self._confirm_delete(i))
            self.table.setCellWidget(row, len(self.columns), delete_button)
        self.total_label.setText(f"Total {self.item_label}s: {vm.filtered_count}")
        self.pagination.update_state(vm.current_page, vm.total_pages)

    def _confirm_delete(self, item: Any):
        answer = QMessageBox.question(self, f"Delete {self.item_label}",
                                      f"Are you sure you want to delete this {self.item_label}?")
        if answer == QMessageBox.Yes:
            self.viewmodel.remove_item(item.id)


class AdminArticlesPage(AdminListPage):
    item_label = "article"
    create_path = "/admin/articles/create"
    columns: Sequence[Column] = (
        ("Title", lambda a: a.title),
        ("Category", lambda a: a.category),
        ("Author", lambda a: a.author),
        ("Created At", lambda a: format_date_short(a.date, with_time=True)),
    )

    def __init__(self, viewmodel: ListViewModel, parent=None):
        super().__init__("Articles", viewmodel, with_categories=True, parent=parent)


class AdminCategoriesPage(AdminListPage):
    item_label = "category"
    create_path = "/admin/categories/create"
    columns: Sequence[Column] = (
        ("Name", lambda c: c.name),
        ("Description", lambda c: c.description or ""),
        ("Created At", lambda c: format_date_short(c.created_at, with_time=True)),
    )

    def __init__(self, viewmodel: ListViewModel, parent=None):
        super().__init__("Categories", viewmodel, with_categories=False, parent=parent)


class CreateArticlePage(BasePage):
    """新建文章表单，含图片上传与预览"""

    def __init__(self, viewmodel: ArticleFormViewModel, parent=None):
        super().__init__("Create Article", viewmodel, parent)
        form = QFormLayout()
        self.title_edit = QLineEdit()
        self.excerpt_edit = QLineEdit()
        self.category_combo = QComboBox()
        self.category_combo.addItem("Select category", "")
        self.tags_edit = QLineEdit()
        self.tags_edit.setPlaceholderText("tag1, tag2")
        self.content_edit = QTextEdit()
        self._errors = {name: error_label() for name in ("title", "excerpt", "category", "content")}

        image_row = QHBoxLayout()
        self.image_label = QLabel("No image selected")
        self.image_button = QPushButton("Upload Image")
        self.image_button.clicked.connect(self._choose_image)
        self.remove_image_button = QPushButton("Remove")
        self.remove_image_button.setVisible(False)
        self.remove_image_button.clicked.connect(viewmodel.remove_image)
        image_row.addWidget(self.image_label, 1)
        image_row.addWidget(self.image_button)
        image_row.addWidget(self.remove_image_button)
        self.image_error = error_label()

        form.addRow("Title", self.title_edit)
        form.addRow("", self._errors["title"])
        form.addRow("Excerpt", self.excerpt_edit)
        form.addRow("", self._errors["excerpt"])
        form.addRow("Category", self.category_combo)
        form.addRow("", self._errors["category"])
        form.addRow("Image", image_row)
        form.addRow("", self.image_error)
        form.addRow("Tags", self.tags_edit)
        form.addRow("Content", self.content_edit)
        form.addRow("", self._errors["content"])
        self.main_layout.addLayout(form)

        self.success_label = QLabel("Article created successfully! Redirecting...")
        self.success_label.setStyleSheet("color: #067647;")
        self.success_label.setVisible(False)
        self.main_layout.addWidget(self.success_label)

        buttons = QHBoxLayout()
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(lambda: self.navigate_requested.emit("/admin/articles"))
        self.preview_button = QPushButton("Preview")
        self.preview_button.clicked.connect(self._on_preview)
        self.submit_button = QPushButton("Create Article")
        self.submit_button.clicked.connect(self._on_submit)
        buttons.addStretch(1)
        for button in (cancel_button, self.preview_button, self.submit_button):
            buttons.addWidget(button)
        self.main_layout.addLayout(buttons)

        self.preview = QTextBrowser()
        self.preview.setVisible(False)
        self.main_layout.addWidget(self.preview, 1)

        viewmodel.field_errors_changed.connect(lambda errors: show_field_errors(self._errors, errors))
        viewmodel.categories_loaded.connect(self._fill_categories)
        viewmodel.upload_state_changed.connect(self._on_uploading)
        viewmodel.image_uploaded.connect(self._on_image_uploaded)
        viewmodel.image_error.connect(self._on_image_error)
        viewmodel.preview_ready.connect(self._show_preview)
        viewmodel.submitted.connect(self._on_submitted)
        viewmodel.busy_changed.connect(lambda busy: self.submit_button.setEnabled(not busy))

    def activate(self):
        if self.viewmodel.ensure_admin():
            self.viewmodel.load_categories()

    def _fill_categories(self, categories: List[Category]):
        for category in categories:
            self.category_combo.addItem(category.name, category.id)

    def _choose_image(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select image", "",
                                              "Images (*.jpg *.jpeg *.png *.gif *.webp)")
        if path:
            self.image_error.setVisible(False)
            self.viewmodel.select_image(path)

    def _on_uploading(self, uploading: bool):
        self.image_button.setEnabled(not uploading)
        if uploading:
            self.image_label.setText("Uploading...")

    def _on_image_uploaded(self, url: str):
        self.image_label.setText(url or "No image selected")
        self.remove_image_button.setVisible(bool(url))

    def _on_image_error(self, message: str):
        self.image_error.setText(message)
        self.image_error.setVisible(True)

    def _form_values(self):
        return (self.title_edit.text(), self.content_edit.toPlainText(), self.excerpt_edit.text(),
                self.category_combo.currentData() or "", self.tags_edit.text())

    def _on_preview(self):
        self.viewmodel.build_preview(*self._form_values())

    def _show_preview(self, preview: dict):
        tags = ", ".join(preview["tags"])
        self.preview.setHtml(
            f"<h2>{preview['title']}</h2>"
            f"<p><i>{preview['category']} · {preview['author']} · {preview['read_time']}</i></p>"
            f"<p>{preview['excerpt']}</p>{preview['content_html']}"
            + (f"<p>Tags: {tags}</p>" if tags else ""))
        self.preview.setVisible(True)

    def _on_submit(self):
        self.viewmodel.submit(*self._form_values())

    def _on_submitted(self):
        self.success_label.setVisible(True)
        self.submit_button.setEnabled(False)


class CreateCategoryPage(BasePage):
    def __init__(self, viewmodel: CategoryFormViewModel, parent=None):
        super().__init__("Create Category", viewmodel, parent)
        form = QFormLayout()
        self.name_edit = QLineEdit()
        self.description_edit = QTextEdit()
        self.description_edit.setMaximumHeight(120)
        self._errors = {"name": error_label()}
        form.addRow("Name", self.name_edit)
        form.addRow("", self._errors["name"])
        form.addRow("Description", self.description_edit)
        self.main_layout.addLayout(form)

        self.success_label = QLabel("Category created successfully! Redirecting...")
        self.success_label.setStyleSheet("color: #067647;")
        self.success_label.setVisible(False)
        self.main_layout.addWidget(self.success_label)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(lambda: self.navigate_requested.emit("/admin/categories"))
        self.submit_button = QPushButton("Create Category")
        self.submit_button.clicked.connect(
            lambda: viewmodel.submit(self.name_edit.text(), self.description_edit.toPlainText()))
        buttons.addWidget(cancel_button)
        buttons.addWidget(self.submit_button)
        self.main_layout.addLayout(buttons)
        self.main_layout.addStretch(1)

        viewmodel.field_errors_changed.connect(lambda errors: show_field_errors(self._errors, errors))
        viewmodel.busy_changed.connect(lambda busy: self.submit_button.setEnabled(not busy))
        viewmodel.submitted.connect(lambda: self.success_label.setVisible(True))
