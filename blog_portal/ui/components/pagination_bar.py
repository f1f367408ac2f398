"""
分页栏组件

Previous / 页码按钮 / Next；只有多于一页时显示。
"""

import logging
from typing import List

from PySide6.QtCore import Signal as pyqtSignal
from PySide6.QtWidgets import QHBoxLayout, QPushButton, QWidget


class PaginationBar(QWidget):
    """
    信号:
    - page_requested(int): 点击页码按钮
    - previous_requested() / next_requested()
    """
    page_requested = pyqtSignal(int)
    previous_requested = pyqtSignal()
    next_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger('blog_portal.ui.components.pagination_bar')
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)

        self.previous_button = QPushButton("Previous")
        self.previous_button.clicked.connect(self.previous_requested.emit)
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(self.next_requested.emit)
        self._page_buttons: List[QPushButton] = []

        self._layout.addStretch(1)
        self._layout.addWidget(self.previous_button)
        self._layout.addWidget(self.next_button)
        self._layout.addStretch(1)
        self.setVisible(False)

    def update_state(self, current_page: int, total_pages: int):
        """按当前页与总页数重建页码按钮"""
        for button in self._page_buttons:
            self._layout.removeWidget(button)
            button.deleteLater()
        self._page_buttons = []

        insert_at = self._layout.indexOf(self.next_button)
        for page in range(1, total_pages + 1):
            button = QPushButton(str(page))
            button.setCheckable(True)
            button.setChecked(page == current_page)
            button.clicked.connect(lambda _checked=False, p=page: self.page_requested.emit(p))
            self._layout.insertWidget(insert_at, button)
            insert_at += 1
            self._page_buttons.append(button)

        self.previous_button.setEnabled(current_page > 1)
        self.next_button.setEnabled(current_page < total_pages)
        self.setVisible(total_pages > 1)
