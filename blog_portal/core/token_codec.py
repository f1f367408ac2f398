"""
Bearer token 解码工具。

令牌是三段式紧凑字符串 (header.payload.signature)，这里只解码中间一段，
把它当作不可信的 claims JSON 对象。不做任何签名校验。
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional

from blog_portal.models import Role

logger = logging.getLogger('blog_portal.core.token_codec')

# 身份值为 1 的用户被视为管理员 (沿用服务端约定的启发式规则，不是安全机制)
ADMIN_IDENTITY = 1


def decode_claims(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    解码令牌中间段为 claims 字典。

    Args:
        token: 原始令牌字符串。

    Returns:
        claims 字典；令牌为空、段数不足、base64/JSON 解码失败，
        或解码结果不是 JSON 对象时返回 None。
    """
    if not token or not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        logger.debug("Token has no payload segment.")
        return None

    segment = parts[1].strip()
    # 兼容 base64url 字符集，并补齐缺失的 '='
    segment = segment.replace("-", "+").replace("_", "/")
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.b64decode(segment, validate=True)
        claims = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        # json.JSONDecodeError 与 UnicodeDecodeError 都是 ValueError 的子类
        logger.debug(f"Token payload decode failed: {e}")
        return None

    if not isinstance(claims, dict):
        logger.debug(f"Token payload is not a JSON object (got {type(claims).__name__}).")
        return None
    return claims


def _has_identity(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float)) and value != 0


def claims_identity(claims: Dict[str, Any]) -> Any:
    """返回 claims 中的 userId；缺失或为假值时返回 None (id 声明不参与角色推导)"""
    value = claims.get("userId")
    return value if _has_identity(value) else None


def role_from_identity(identity: Any) -> Role:
    """身份值等于 1 (数字或字符串) 视为 Admin，其余均为 User"""
    if isinstance(identity, str):
        return Role.ADMIN if identity.strip() == str(ADMIN_IDENTITY) else Role.USER
    return Role.ADMIN if identity == ADMIN_IDENTITY else Role.USER


def resolve_role(claims: Optional[Dict[str, Any]]) -> Optional[Role]:
    """
    从 claims 推导角色。

    显式的 role 声明优先 (无法识别的角色值原样视为无效，返回 None)；
    没有 role 声明时根据身份值推导；两者都没有时返回 None。
    """
    if not claims:
        return None
    declared = claims.get("role")
    if declared not in (None, ""):
        return Role.parse(declared)
    identity = claims_identity(claims)
    if identity is None:
        return None
    return role_from_identity(identity)


def encode_claims(claims: Dict[str, Any], header: Optional[Dict[str, Any]] = None,
                  signature: str = "signature") -> str:
    """
    将 claims 编码为三段式令牌 (签名部分为占位符)。

    客户端从不校验签名，此函数主要供测试与本地调试构造令牌。
    """
    def _segment(obj: Dict[str, Any]) -> str:
        raw = json.dumps(obj, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{_segment(header or {'alg': 'none', 'typ': 'JWT'})}.{_segment(claims)}.{signature}"
