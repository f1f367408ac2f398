"""
请求取消标志，在 UI 线程与后台请求线程之间传递取消信号。

每个页面的每次请求持有一个独立的标志；页面被替换时设置标志，
后台结果返回后若发现标志已设置则直接丢弃。
"""

import threading

from .exception import RequestCancelledError


class CancellationFlag:
    """一个简单的线程安全的取消标志。"""
    def __init__(self, label: str = ""):
        self.label = label
        self._is_set = False
        self._lock = threading.Lock()

    def set(self):
        """设置取消标志。"""
        with self._lock:
            self._is_set = True

    def is_set(self) -> bool:
        """检查取消标志是否已设置。"""
        with self._lock:
            return self._is_set

    def raise_if_set(self):
        """如果已取消则抛出 RequestCancelledError。"""
        if self.is_set():
            raise RequestCancelledError(f"Request cancelled: {self.label or 'unnamed'}")

    def __repr__(self):
        return f"CancellationFlag(label={self.label!r}, is_set={self.is_set()})"
