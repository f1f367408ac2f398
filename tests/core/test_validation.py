import pytest

from blog_portal.core.exception import FormValidationError
from blog_portal.core.validation import (ARTICLE_RULES, CATEGORY_RULES, LOGIN_RULES, REGISTER_RULES,
                                         validate, validate_or_raise)


def test_login_rules():
    assert validate({"identifier": "", "password": "123"}, LOGIN_RULES) == {
        "identifier": "Username is required",
        "password": "Password must be at least 6 characters",
    }
    assert validate({"identifier": "a", "password": "123456"}, LOGIN_RULES) == {}


def test_register_rules():
    errors = validate({"username": "ab", "email": "not-an-email", "password": "12345", "role": "Guest"},
                      REGISTER_RULES)
    assert set(errors) == {"username", "email", "password", "role"}
    assert errors["role"] == "Please select a role"
    assert validate({"username": "abc", "email": "a@b.co", "password": "123456", "role": "Admin"},
                    REGISTER_RULES) == {}


def test_article_rules_thresholds():
    valid = {"title": "Hello", "content": "c" * 50, "excerpt": "e" * 20, "category": "1"}
    assert validate(valid, ARTICLE_RULES) == {}
    errors = validate({"title": "Hey", "content": "c" * 49, "excerpt": "short", "category": ""},
                      ARTICLE_RULES)
    assert errors == {
        "title": "Title must be at least 5 characters",
        "content": "Content must be at least 50 characters",
        "excerpt": "Excerpt must be at least 20 characters",
        "category": "Please select a category",
    }


def test_category_rules_and_raise():
    assert validate({"name": "AI"}, CATEGORY_RULES) == {}
    with pytest.raises(FormValidationError) as exc_info:
        validate_or_raise({"name": "A"}, CATEGORY_RULES)
    assert exc_info.value.first_error() == "Category name must be at least 2 characters"
