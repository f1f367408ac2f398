"""
Custom exceptions for the blog portal client.
"""

from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base exception class for HTTP API errors."""
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload  # 解析后的响应体 (如果有)

    @property
    def has_response(self) -> bool:
        """服务器是否返回了响应 (区分于连接失败/超时)"""
        return self.status_code is not None

    def __str__(self):
        if self.status_code:
            return f"[Code: {self.status_code}] {self.message}"
        return self.message


class RequestCancelledError(ApiError):
    """请求在发送前或结果应用前已被取消。"""
    def __init__(self, message: str = "Request cancelled"):
        super().__init__(message)


class FormValidationError(Exception):
    """表单校验失败，errors 为 字段名 -> 错误信息。"""
    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)

    def first_error(self) -> Optional[str]:
        return next(iter(self.errors.values()), None)
