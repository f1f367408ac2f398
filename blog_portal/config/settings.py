"""
应用配置

默认值在 DEFAULT_CONFIG 中定义，随后由环境变量 (可来自 .env) 覆盖。
配置通过 dependency_injector 的 Configuration provider 注入各服务。
"""

import logging
import os
from typing import Any, Dict, Optional

from dependency_injector import providers

logger = logging.getLogger('blog_portal.config.settings')

DEFAULT_CONFIG: Dict[str, Any] = {
    "env": "production",
    "api": {
        "base_url": "https://test-fe.mysellerpintar.com/api",
        "upload_url": "https://test-fe.mysellerpintar.com/api/upload",
        "timeout": 30,
    },
    "ui": {
        "search_debounce_ms": 400,
        "public_page_size": 9,
        "admin_page_size": 10,
        "register_redirect_ms": 2000,
        "article_redirect_ms": 2000,
        "category_redirect_ms": 1500,
    },
    "logging": {
        "level": "INFO",
        "dir": None,
    },
    "settings": {
        "organization": "BlogPortal",
        "application": "BlogPortalClient",
    },
}

# 环境变量 -> 配置路径
ENV_OVERRIDES = {
    "BLOG_PORTAL_ENV": "env",
    "BLOG_PORTAL_API_URL": "api.base_url",
    "BLOG_PORTAL_UPLOAD_URL": "api.upload_url",
    "BLOG_PORTAL_TIMEOUT": "api.timeout",
    "BLOG_PORTAL_LOG_LEVEL": "logging.level",
    "BLOG_PORTAL_LOG_DIR": "logging.dir",
}

_INT_PATHS = {"api.timeout"}


def load_dotenv_file(project_root: str) -> bool:
    """加载项目根目录下的 .env (存在时)"""
    from dotenv import load_dotenv

    dotenv_path = os.path.join(project_root, '.env')
    if not os.path.exists(dotenv_path):
        logger.info(f".env 文件未找到于: {dotenv_path}，跳过加载环境变量。")
        return False
    load_dotenv(dotenv_path=dotenv_path)
    logger.info(f"已加载 .env 文件: {dotenv_path}")
    return True


def _set_path(target: Dict[str, Any], dotted: str, value: Any):
    node = target
    parts = dotted.split(".")
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = value


def build_config(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """合并默认配置与环境变量覆盖，返回新的配置字典"""
    environ = os.environ if environ is None else environ
    merged = _deep_copy(DEFAULT_CONFIG)
    for env_name, path in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw in (None, ""):
            continue
        value: Any = raw
        if path in _INT_PATHS:
            try:
                value = int(raw)
            except ValueError:
                logger.warning(f"Ignoring non-integer {env_name}={raw!r}")
                continue
        _set_path(merged, path, value)
    if merged["env"] == "development" and not environ.get("BLOG_PORTAL_LOG_LEVEL"):
        merged["logging"]["level"] = "DEBUG"
    return merged


def apply_config(config: providers.Configuration, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """把合并后的配置写入 Configuration provider"""
    values = build_config(environ)
    config.from_dict(values)
    logger.debug(f"Configuration applied: api.base_url={values['api']['base_url']}, env={values['env']}")
    return values


def _deep_copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _deep_copy(v) for k, v in value.items()}
    return value
