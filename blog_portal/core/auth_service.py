#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
认证服务模块 - 封装 /auth/login 与 /auth/register 调用
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.exception import ApiError, RequestCancelledError
from blog_portal.utils.api_client import ApiClient

LOGIN_PATH = "auth/login"
REGISTER_PATH = "auth/register"

ALL_ATTEMPTS_FAILED = ("All login attempts failed. Make sure you're using the username "
                       "you registered with, not email.")
NO_TOKEN_RECEIVED = "No token received from server"

REGISTER_GENERIC_ERROR = "Registration failed. Please try again."
REGISTER_USERNAME_TAKEN = "Username already exists. Please choose a different username."
REGISTER_EMAIL_TAKEN = "Email already exists. Please use a different email address."
REGISTER_NO_RESPONSE = "No response from server. Please check your connection."


@dataclass
class LoginResult:
    """登录接口的返回结果"""
    token: str
    role: Optional[str]
    username: str


def login_payloads(identifier: str, password: str) -> List[Dict[str, str]]:
    """
    生成依次尝试的登录请求体。

    服务端只接受 username 字段；当用户输入的是邮箱时，额外尝试邮箱的本地部分。
    """
    identifier = identifier.strip()
    payloads = [{"username": identifier, "password": password}]
    if "@" in identifier:
        local_part = identifier.split("@")[0]
        if local_part and local_part != identifier:
            payloads.append({"username": local_part, "password": password})
    return payloads


def describe_register_error(error: ApiError) -> str:
    """将注册失败映射为面向用户的提示"""
    if not error.has_response:
        return REGISTER_NO_RESPONSE

    payload = error.payload if isinstance(error.payload, dict) else {}
    message = str(payload.get("message") or "")
    detail = str(payload.get("error") or "")
    if "username" in message or "username" in detail or error.status_code == 400:
        return REGISTER_USERNAME_TAKEN
    if "email" in message or "email" in detail:
        return REGISTER_EMAIL_TAKEN
    return message or detail or f"Server error: {error.status_code}"


class AuthService:
    """登录与注册"""

    def __init__(self, api_client: ApiClient):
        self.logger = logging.getLogger('blog_portal.core.auth_service')
        self.api_client = api_client

    def login(self, identifier: str, password: str,
              cancel_flag: Optional[CancellationFlag] = None) -> LoginResult:
        """
        依次尝试登录请求体，返回第一个成功的结果。

        Raises:
            RequestCancelledError: 请求被取消。
            ApiError: 所有尝试均失败 (message 为统一提示，status_code 为最后一次的状态码)。
        """
        last_error: Optional[ApiError] = None
        for attempt, payload in enumerate(login_payloads(identifier, password), start=1):
            try:
                self.logger.debug(f"Login attempt {attempt} for username '{payload['username']}'")
                response = self.api_client.post(LOGIN_PATH, payload, cancel_flag=cancel_flag) or {}
                token = response.get("token") if isinstance(response, dict) else None
                if not token:
                    raise ApiError(NO_TOKEN_RECEIVED, payload=response)
                username = response.get("username") or payload["username"] or identifier
                self.logger.info(f"Login succeeded on attempt {attempt} for '{username}'.")
                return LoginResult(token=token, role=response.get("role"), username=username)
            except RequestCancelledError:
                raise
            except ApiError as e:
                self.logger.warning(f"Login attempt {attempt} failed: {e}")
                last_error = e

        raise ApiError(ALL_ATTEMPTS_FAILED,
                       status_code=last_error.status_code if last_error else None,
                       payload=last_error.payload if last_error else None)

    def register(self, username: str, email: str, password: str, role: str,
                 cancel_flag: Optional[CancellationFlag] = None) -> Any:
        """
        注册新用户。

        Raises:
            ApiError: message 已映射为面向用户的提示。
        """
        payload = {"username": username.strip(), "email": email.strip(),
                   "password": password, "role": role}
        try:
            result = self.api_client.post(REGISTER_PATH, payload, cancel_flag=cancel_flag)
        except RequestCancelledError:
            raise
        except ApiError as e:
            friendly = describe_register_error(e)
            self.logger.warning(f"Registration failed for '{payload['username']}': {e} -> {friendly}")
            raise ApiError(friendly, status_code=e.status_code, payload=e.payload) from e
        self.logger.info(f"Registered user '{payload['username']}' with role {role}.")
        return result
