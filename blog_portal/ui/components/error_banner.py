"""
错误横幅组件 - 显示一条可关闭的错误信息
"""

import logging

from PySide6.QtCore import Signal as pyqtSignal, Slot as pyqtSlot
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton


class ErrorBanner(QFrame):
    """
    信号:
    - dismissed(): 用户点击关闭按钮
    """
    dismissed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger('blog_portal.ui.components.error_banner')
        self.setObjectName("errorBanner")
        self.setStyleSheet("#errorBanner { background: #fdecea; border: 1px solid #f5c2c0; border-radius: 4px; }"
                           "QLabel { color: #b42318; }")

        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 6, 6, 6)
        self.message_label = QLabel()
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label, 1)

        self.close_button = QPushButton("×")
        self.close_button.setFlat(True)
        self.close_button.setFixedWidth(24)
        self.close_button.clicked.connect(self._on_close_clicked)
        layout.addWidget(self.close_button)

        self.setVisible(False)

    @property
    def message(self) -> str:
        return self.message_label.text()

    @pyqtSlot(str)
    def show_message(self, message: str):
        self.message_label.setText(message)
        self.setVisible(bool(message))

    @pyqtSlot()
    def clear(self):
        self.message_label.clear()
        self.setVisible(False)

    def _on_close_clicked(self):
        self.clear()
        self.dismissed.emit()
