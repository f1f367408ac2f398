"""路由页面基类"""

import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal as pyqtSignal
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from blog_portal.ui.components.error_banner import ErrorBanner
from blog_portal.ui.viewmodels.base_viewmodel import BaseViewModel


class BasePage(QWidget):
    """
    路由页面基类。

    持有一个 ViewModel (可选)，把它的错误信号接到错误横幅上；
    页面被替换时由主窗口调用 dispose()。
    """

    navigate_requested = pyqtSignal(str)

    def __init__(self, title: str, viewmodel: Optional[BaseViewModel] = None, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger(f'blog_portal.ui.views.{type(self).__name__}')
        self.viewmodel = viewmodel

        self.main_layout = QVBoxLayout(self)
        self.main_layout.setContentsMargins(24, 16, 24, 16)
        self.main_layout.setSpacing(12)

        self.title_label = QLabel(title)
        self.title_label.setStyleSheet("font-size: 22px; font-weight: bold;")
        self.main_layout.addWidget(self.title_label)

        self.error_banner = ErrorBanner(self)
        self.main_layout.addWidget(self.error_banner)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.loading_label.setVisible(False)
        self.main_layout.addWidget(self.loading_label)

        if viewmodel is not None:
            viewmodel.error_occurred.connect(self.error_banner.show_message)
            viewmodel.error_cleared.connect(self.error_banner.clear)
            viewmodel.busy_changed.connect(self._on_busy_changed)
            self.error_banner.dismissed.connect(viewmodel.clear_error)
            navigate = getattr(viewmodel, "navigate_requested", None)
            if navigate is not None:
                navigate.connect(self.navigate_requested.emit)

    def _on_busy_changed(self, busy: bool):
        self.loading_label.setVisible(busy)

    def activate(self):
        """页面显示后调用，子类在这里触发首次加载"""

    def dispose(self):
        if self.viewmodel is not None:
            self.viewmodel.dispose()
        self.logger.debug(f"{type(self).__name__} disposed.")
