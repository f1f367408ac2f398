"""
搜索与分类筛选栏
"""

from typing import List, Optional

from PySide6.QtCore import Signal as pyqtSignal, Slot as pyqtSlot
from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLineEdit, QWidget

from blog_portal.core.list_controller import ALL_CATEGORIES
from blog_portal.models import Facet


class SearchFilters(QWidget):
    """
    搜索框 (原始文本，防抖由 ViewModel 负责) + 可选的分类下拉框。

    信号:
    - search_text_changed(str)
    - search_submitted()
    - category_changed(str): 'all' 或分类名
    """
    search_text_changed = pyqtSignal(str)
    search_submitted = pyqtSignal()
    category_changed = pyqtSignal(str)

    def __init__(self, placeholder: str = "Search...", with_categories: bool = True, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText(placeholder)
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self.search_text_changed.emit)
        self.search_edit.returnPressed.connect(self.search_submitted.emit)
        layout.addWidget(self.search_edit, 1)

        self.category_combo: Optional[QComboBox] = None
        if with_categories:
            self.category_combo = QComboBox()
            self.category_combo.addItem("All Categories", ALL_CATEGORIES)
            self.category_combo.currentIndexChanged.connect(self._on_category_index_changed)
            layout.addWidget(self.category_combo)

    @pyqtSlot(list)
    def set_facets(self, facets: List[Facet]):
        """用 facets 重建分类下拉框，尽量保持当前选择"""
        if self.category_combo is None:
            return
        current = self.category_combo.currentData()
        self.category_combo.blockSignals(True)
        self.category_combo.clear()
        self.category_combo.addItem("All Categories", ALL_CATEGORIES)
        for facet in facets:
            self.category_combo.addItem(f"{facet.name} ({facet.count})", facet.name)
        index = self.category_combo.findData(current)
        self.category_combo.setCurrentIndex(max(0, index))
        self.category_combo.blockSignals(False)

    def _on_category_index_changed(self, _index: int):
        self.category_changed.emit(self.category_combo.currentData() or ALL_CATEGORIES)
