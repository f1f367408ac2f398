"""ViewModel 基类: 后台请求 (QThreadPool)、忙碌/错误状态与页面销毁时的取消"""

import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal as pyqtSignal, Slot as pyqtSlot

from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.exception import ApiError, RequestCancelledError
from blog_portal.core.validation import validate

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class WorkerSignals(QObject):
    """后台任务通过信号把结果送回 UI 线程"""
    succeeded = pyqtSignal(int, object)
    failed = pyqtSignal(int, object)


class RequestWorker(QRunnable):
    """在 QThreadPool 中执行一次网络请求"""

    def __init__(self, task_id: int, fn: Callable[[CancellationFlag], Any], flag: CancellationFlag,
                 signals: WorkerSignals, parent_logger: logging.Logger):
        super().__init__()
        self.task_id = task_id
        self.fn = fn
        self.flag = flag
        self.signals = signals
        self.logger = parent_logger

    @pyqtSlot()
    def run(self):
        self.logger.debug(f"RequestWorker {self.task_id} ({self.flag.label}) started.")
        try:
            result = self.fn(self.flag)
        except Exception as e:
            self.logger.debug(f"RequestWorker {self.task_id} failed: {e}")
            self.signals.failed.emit(self.task_id, e)
            return
        self.signals.succeeded.emit(self.task_id, result)


@dataclass
class _PendingTask:
    flag: CancellationFlag
    on_success: Callable[[Any], None]
    on_error: Optional[Callable[[Exception], None]]
    signals: WorkerSignals


class BaseViewModel(QObject):
    """
    ViewModel 基类。

    负责后台请求的调度、取消、忙碌状态与错误横幅文本。
    页面被替换时调用 dispose()，之后返回的结果一律丢弃。
    """

    busy_changed = pyqtSignal(bool)
    error_occurred = pyqtSignal(str)
    error_cleared = pyqtSignal()

    _task_ids = count(1)

    def __init__(self, parent: Optional[QObject] = None, thread_pool: Optional[QThreadPool] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f'blog_portal.ui.viewmodels.{type(self).__name__}')
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._tasks: Dict[int, _PendingTask] = {}
        self._error_message = ""
        self._disposed = False

    # --- 状态 ---
    @property
    def is_busy(self) -> bool:
        return bool(self._tasks)

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def disposed(self) -> bool:
        return self._disposed

    def set_error(self, message: str):
        self._error_message = message
        self.logger.info(f"Error shown to user: {message}")
        self.error_occurred.emit(message)

    @pyqtSlot()
    def clear_error(self):
        """关闭错误横幅"""
        if self._error_message:
            self._error_message = ""
            self.error_cleared.emit()

    # --- 请求调度 ---
    def start_request(self, label: str, fn: Callable[[CancellationFlag], Any],
                      on_success: Callable[[Any], None],
                      on_error: Optional[Callable[[Exception], None]] = None) -> Optional[CancellationFlag]:
        """
        在后台线程执行 fn(flag)。结果在 UI 线程中交给 on_success / on_error。

        Returns:
            本次请求的取消标志；ViewModel 已销毁时返回 None。
        """
        if self._disposed:
            self.logger.warning(f"start_request('{label}') ignored: view model disposed.")
            return None

        task_id = next(self._task_ids)
        flag = CancellationFlag(label)
        signals = WorkerSignals()
        signals.succeeded.connect(self._on_worker_succeeded)
        signals.failed.connect(self._on_worker_failed)
        was_busy = self.is_busy
        self._tasks[task_id] = _PendingTask(flag, on_success, on_error, signals)
        if not was_busy:
            self.busy_changed.emit(True)

        self.logger.debug(f"Submitting request '{label}' (task {task_id}) to thread pool.")
        self._thread_pool.start(RequestWorker(task_id, fn, flag, signals, self.logger))
        return flag

    def _finish_task(self, task_id: int) -> Optional[_PendingTask]:
        task = self._tasks.pop(task_id, None)
        if task is not None and not self._tasks:
            self.busy_changed.emit(False)
        return task

    @pyqtSlot(int, object)
    def _on_worker_succeeded(self, task_id: int, result: Any):
        task = self._finish_task(task_id)
        if task is None or task.flag.is_set():
            self.logger.debug(f"Discarding result of cancelled task {task_id}.")
            return
        task.on_success(result)

    @pyqtSlot(int, object)
    def _on_worker_failed(self, task_id: int, error: Exception):
        task = self._finish_task(task_id)
        if task is None or task.flag.is_set() or isinstance(error, RequestCancelledError):
            self.logger.debug(f"Discarding failure of cancelled task {task_id}: {error}")
            return
        if isinstance(error, ApiError):
            self.logger.warning(f"Request '{task.flag.label}' failed: {error}")
        else:
            self.logger.error(f"Request '{task.flag.label}' raised unexpected error: {error}", exc_info=error)
        if task.on_error is not None:
            task.on_error(error)
        else:
            self.set_error(error.message if isinstance(error, ApiError) else GENERIC_ERROR_MESSAGE)

    @pyqtSlot()
    def dispose(self):
        """取消所有进行中的请求；之后到达的结果被丢弃"""
        if self._disposed:
            return
        self._disposed = True
        for task in self._tasks.values():
            task.flag.set()
        self.logger.debug(f"{type(self).__name__} disposed, cancelled {len(self._tasks)} pending request(s).")


class FormViewModel(BaseViewModel):
    """带字段校验错误与页面跳转请求的表单 ViewModel"""

    field_errors_changed = pyqtSignal(dict)
    navigate_requested = pyqtSignal(str)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._field_errors: Dict[str, str] = {}

    @property
    def field_errors(self) -> Dict[str, str]:
        return dict(self._field_errors)

    def validate_fields(self, data, rules) -> bool:
        self._field_errors = validate(data, rules)
        self.field_errors_changed.emit(dict(self._field_errors))
        if self._field_errors:
            self.logger.debug(f"Form validation failed: {self._field_errors}")
        return not self._field_errors

    def navigate_later(self, path: str, delay_ms: int):
        """延迟跳转；页面已销毁时不再跳转"""
        QTimer.singleShot(delay_ms, lambda: self._navigate_if_alive(path))

    def _navigate_if_alive(self, path: str):
        if self.disposed:
            self.logger.debug(f"Skipping delayed navigation to {path}: view model disposed.")
            return
        self.navigate_requested.emit(path)
