#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
数据模型模块 - 定义应用程序中使用的数据结构
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any

PLACEHOLDER_IMAGE_TEMPLATE = "https://picsum.photos/400/240?random={n}"
UNKNOWN_AUTHOR = "Unknown Author"
UNCATEGORIZED = "Uncategorized"


class Role(str, Enum):
    """用户角色"""
    USER = "User"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """将任意值解析为 Role；无法识别时返回 None (区分大小写，与服务端保持一致)"""
        if isinstance(value, Role):
            return value
        for role in cls:
            if value == role.value:
                return role
        return None


@dataclass
class User:
    """当前会话用户"""
    id: str
    username: str
    role: Role
    email: str = ""

    def to_dict(self) -> dict:
        """序列化为可持久化的字典 (role 存为字符串)"""
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["User"]:
        """从持久化字典恢复；缺少 id/username 或角色无效时返回 None"""
        if not isinstance(data, dict):
            return None
        role = Role.parse(data.get("role"))
        user_id = data.get("id")
        username = data.get("username")
        if role is None or user_id in (None, "") or not username:
            return None
        return cls(id=str(user_id), username=str(username), role=role,
                   email=str(data.get("email") or ""))


@dataclass
class Article:
    """文章数据模型 (已从服务端记录转换为展示用结构)"""
    id: str
    title: str
    content: str
    author: str = UNKNOWN_AUTHOR
    category: str = UNCATEGORIZED
    date: str = ""  # ISO 格式的 createdAt，原样保留
    image_url: Optional[str] = None
    category_id: Optional[str] = None

    def __post_init__(self):
        # 分类必须是非空的展示字符串
        if not self.category or not str(self.category).strip():
            self.category = UNCATEGORIZED

    @classmethod
    def from_api_record(cls, record: Dict[str, Any], index: int) -> "Article":
        """
        将服务端返回的文章记录转换为 Article。

        Args:
            record: 服务端记录 (id, title, content, imageUrl, createdAt, category{name}, user{username})。
            index: 记录在响应中的位置，用于生成确定性的占位图片。
        """
        category = record.get("category") or {}
        user = record.get("user") or {}
        category_name = category.get("name") if isinstance(category, dict) else None
        author = user.get("username") if isinstance(user, dict) else None
        category_id = record.get("categoryId") or (category.get("id") if isinstance(category, dict) else None)
        return cls(
            id=str(record.get("id", "")),
            title=record.get("title") or "",
            content=record.get("content") or "",
            image_url=record.get("imageUrl") or PLACEHOLDER_IMAGE_TEMPLATE.format(n=index + 1),
            author=author or UNKNOWN_AUTHOR,
            date=record.get("createdAt") or "",
            category=category_name or UNCATEGORIZED,
            category_id=str(category_id) if category_id is not None else None,
        )


@dataclass
class Category:
    """文章分类"""
    id: str
    name: str
    description: Optional[str] = None
    created_at: str = ""

    @classmethod
    def from_api_record(cls, record: Dict[str, Any]) -> "Category":
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            description=record.get("description"),
            created_at=record.get("createdAt") or "",
        )


@dataclass(frozen=True)
class Facet:
    """分类筛选项: 分类名及其在未过滤集合中的出现次数"""
    name: str
    count: int


@dataclass
class ArticleDraft:
    """新建文章表单数据"""
    title: str = ""
    content: str = ""
    excerpt: str = ""
    category: str = ""  # 分类 id
    image: str = ""  # 上传后得到的图片 URL
    tags: str = ""

    def to_payload(self) -> dict:
        """转换为 POST /articles 的请求体"""
        payload = {
            "title": self.title.strip(),
            "content": self.content,
            "categoryId": self.category,
        }
        if self.image:
            payload["imageUrl"] = self.image
        return payload


@dataclass
class CategoryDraft:
    """新建分类表单数据"""
    name: str = ""
    description: str = ""

    def to_payload(self) -> dict:
        payload = {"name": self.name.strip()}
        if self.description.strip():
            payload["description"] = self.description.strip()
        return payload
