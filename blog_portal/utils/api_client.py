"""
通用的 API 客户端，封装 HTTP 请求逻辑。

所有 requests 异常都会被转换为 ApiError；失败的请求不会自动重试。
"""
import json  # Import json for JSONDecodeError handling
import logging
from typing import Dict, Any, Optional, BinaryIO, Tuple
from urllib.parse import urljoin, urlsplit

import requests

from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.exception import ApiError
from blog_portal.storage.session_storage import SessionCookie

DEFAULT_TIMEOUT = 30


def extract_error_message(payload: Any, fallback: str) -> str:
    """从响应体中尽力提取可读的错误信息 (message 或 error 字段)"""
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value if v)
            if value:
                return str(value)
    return fallback


class ApiClient:
    """封装 HTTP 请求: JSON GET/POST 与 multipart 上传。"""

    def __init__(self, base_url: str, timeout: int = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Args:
            base_url: API 根地址，例如 https://example.com/api
            timeout: 请求超时时间（秒）。
            session: 可注入的 requests.Session (测试用)。
        """
        self.logger = logging.getLogger('blog_portal.utils.api_client')
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.setdefault("Accept", "application/json")
        self._token: Optional[str] = None

    # --- 认证状态 (由会话派生) ---
    def apply_session_cookie(self, cookie: Optional[SessionCookie]):
        """
        根据会话派生的 cookie 重建 cookie 与 Authorization 头。

        cookie 为 None 时清除二者。
        """
        host = urlsplit(self.base_url).hostname or ""
        self.session.cookies.clear()
        self.session.headers.pop("Authorization", None)
        self._token = None
        if cookie is None:
            self.logger.debug("ApiClient: auth cookie cleared.")
            return
        expires = int(cookie.expires_at.timestamp()) if cookie.expires_at else None
        self.session.cookies.set(cookie.name, cookie.value, domain=host, path=cookie.path, expires=expires)
        self.session.headers["Authorization"] = f"Bearer {cookie.value}"
        self._token = cookie.value
        self.logger.debug(f"ApiClient: auth cookie applied for host '{host}'.")

    @property
    def token(self) -> Optional[str]:
        return self._token

    def url_for(self, path: str) -> str:
        """相对路径拼接到 base_url；完整 URL 原样返回"""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

    # --- 请求 ---
    def get(self, path: str, params: Optional[Dict[str, Any]] = None,
            cancel_flag: Optional[CancellationFlag] = None) -> Any:
        return self._request("GET", path, params=params, cancel_flag=cancel_flag)

    def post(self, path: str, json_payload: Dict[str, Any],
             cancel_flag: Optional[CancellationFlag] = None) -> Any:
        return self._request("POST", path, json=json_payload, cancel_flag=cancel_flag)

    def post_multipart(self, url: str, files: Dict[str, Tuple[str, BinaryIO, str]],
                       cancel_flag: Optional[CancellationFlag] = None) -> Any:
        """发送 multipart/form-data 请求 (Content-Type 由 requests 生成)"""
        return self._request("POST", url, files=files, cancel_flag=cancel_flag)

    def _request(self, method: str, path: str, cancel_flag: Optional[CancellationFlag] = None,
                 **kwargs) -> Any:
        """
        发送请求并返回解析后的 JSON。

        Raises:
            RequestCancelledError: 发送前或收到响应后发现请求已取消。
            ApiError: 网络错误、超时、HTTP 4xx/5xx 或响应不是合法 JSON。
        """
        url = self.url_for(path)
        if cancel_flag:
            cancel_flag.raise_if_set()

        self.logger.debug(f"ApiClient: Sending {method} to {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            self.logger.error(f"API request TIMEOUT ({self.timeout}s) for {url}: {e}")
            raise ApiError(f"Request timed out after {self.timeout}s", status_code=None) from e
        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed without response for {url}: {e}")
            raise ApiError(f"No response from server: {e}", status_code=None) from e

        if cancel_flag:
            cancel_flag.raise_if_set()

        self.logger.debug(f"ApiClient: Received status code {response.status_code} from {url}")
        payload = self._parse_json(response)

        if not response.ok:
            message = extract_error_message(payload, f"HTTP error! status: {response.status_code}")
            self.logger.warning(f"API request failed with status {response.status_code} for {url}: {message}")
            raise ApiError(message, status_code=response.status_code, payload=payload)

        if payload is None and response.content:
            raise ApiError("Failed to decode JSON response", status_code=response.status_code)
        return payload

    def _parse_json(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            self.logger.debug(f"Response from {response.url} is not JSON: {e}")
            return None

    def close(self):
        self.session.close()
