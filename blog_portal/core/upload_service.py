"""
图片上传服务 - 直接透传到外部上传接口
"""

import logging
import mimetypes
import os
from typing import Any, Optional

from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.exception import ApiError
from blog_portal.utils.api_client import ApiClient

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB

mimetypes.add_type("image/webp", ".webp")

INVALID_TYPE_MESSAGE = "Please select a valid image file (JPEG, PNG, GIF, or WebP)"
TOO_LARGE_MESSAGE = "File size must be less than 5MB"
NO_URL_MESSAGE = "No image URL returned from server"


def guess_image_type(file_path: str) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(file_path)
    return mime_type


def validate_image_file(file_path: str) -> Optional[str]:
    """检查文件类型与大小，合法时返回 None，否则返回错误信息"""
    if guess_image_type(file_path) not in ALLOWED_IMAGE_TYPES:
        return INVALID_TYPE_MESSAGE
    try:
        size = os.path.getsize(file_path)
    except OSError:
        return INVALID_TYPE_MESSAGE
    if size > MAX_IMAGE_SIZE:
        return TOO_LARGE_MESSAGE
    return None


def extract_upload_url(result: Any) -> Optional[str]:
    """上传结果中的 URL 可能位于 url、data.url 或 file_url"""
    if not isinstance(result, dict):
        return None
    data = result.get("data")
    nested = data.get("url") if isinstance(data, dict) else None
    return result.get("url") or nested or result.get("file_url") or None


class UploadService:
    """multipart 上传图片并返回图片 URL"""

    def __init__(self, api_client: ApiClient, upload_url: str):
        self.logger = logging.getLogger('blog_portal.core.upload_service')
        self.api_client = api_client
        self.upload_url = upload_url

    def upload_image(self, file_path: str, cancel_flag: Optional[CancellationFlag] = None) -> str:
        """
        上传图片文件。

        Raises:
            ApiError: 文件不合法、请求失败或响应中没有 URL。
        """
        error = validate_image_file(file_path)
        if error:
            raise ApiError(error)

        file_name = os.path.basename(file_path)
        self.logger.info(f"Uploading image '{file_name}' to {self.upload_url}")
        with open(file_path, "rb") as fh:
            files = {"file": (file_name, fh, guess_image_type(file_path))}
            result = self.api_client.post_multipart(self.upload_url, files, cancel_flag=cancel_flag)

        url = extract_upload_url(result)
        if not url:
            raise ApiError(NO_URL_MESSAGE, payload=result)
        self.logger.info(f"Image uploaded: {url}")
        return url
