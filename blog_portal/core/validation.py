"""
表单校验规则。

每个表单是一组 字段 -> 规则列表；规则返回 None 表示通过，否则返回错误信息。
同一字段只报告第一条失败的规则。
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from blog_portal.core.exception import FormValidationError
from blog_portal.models import Role

Rule = Callable[[Any], Optional[str]]

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def min_length(length: int, message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        return None if len(str(value or "")) >= length else message
    return rule


def email(message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        return None if _EMAIL_RE.match(str(value or "")) else message
    return rule


def one_of(choices: List[str], message: str) -> Rule:
    def rule(value: Any) -> Optional[str]:
        return None if value in choices else message
    return rule


LOGIN_RULES: Dict[str, List[Rule]] = {
    "identifier": [min_length(1, "Username is required")],
    "password": [min_length(6, "Password must be at least 6 characters")],
}

REGISTER_RULES: Dict[str, List[Rule]] = {
    "username": [min_length(3, "Username must be at least 3 characters")],
    "email": [email("Invalid email address")],
    "password": [min_length(6, "Password must be at least 6 characters")],
    "role": [one_of([r.value for r in Role], "Please select a role")],
}

ARTICLE_RULES: Dict[str, List[Rule]] = {
    "title": [min_length(5, "Title must be at least 5 characters")],
    "content": [min_length(50, "Content must be at least 50 characters")],
    "excerpt": [min_length(20, "Excerpt must be at least 20 characters")],
    "category": [min_length(1, "Please select a category")],
}

CATEGORY_RULES: Dict[str, List[Rule]] = {
    "name": [min_length(2, "Category name must be at least 2 characters")],
}


def validate(data: Mapping[str, Any], rules: Mapping[str, List[Rule]]) -> Dict[str, str]:
    """返回 字段 -> 错误信息；全部通过时返回空字典"""
    errors: Dict[str, str] = {}
    for field_name, field_rules in rules.items():
        value = data.get(field_name)
        for rule in field_rules:
            message = rule(value)
            if message:
                errors[field_name] = message
                break
    return errors


def validate_or_raise(data: Mapping[str, Any], rules: Mapping[str, List[Rule]]):
    errors = validate(data, rules)
    if errors:
        raise FormValidationError(errors)
