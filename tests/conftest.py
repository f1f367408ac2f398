# tests/conftest.py
import sys
import os
import logging

import pytest

# 无显示环境下使用 offscreen 平台运行 Qt
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# 将项目根目录添加到 Python 路径
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from PySide6.QtCore import QSettings  # noqa: E402

from blog_portal.core.token_codec import encode_claims  # noqa: E402
from blog_portal.models import Article, Category  # noqa: E402
from blog_portal.storage.session_storage import SessionStorage  # noqa: E402

# --- 设置测试期间的日志级别 ---
logging.getLogger('blog_portal').setLevel(logging.DEBUG)


@pytest.fixture
def qsettings(qapp, tmp_path):
    """每个测试独立的 ini 文件，避免污染用户的真实 QSettings"""
    settings = QSettings(str(tmp_path / "session.ini"), QSettings.IniFormat)
    yield settings
    settings.clear()


@pytest.fixture
def session_storage(qsettings):
    return SessionStorage(settings=qsettings)


@pytest.fixture
def make_token():
    """根据 claims 构造三段式令牌"""
    def _make(**claims):
        return encode_claims(claims)
    return _make


@pytest.fixture
def make_articles():
    """构造 n 篇文章，分类在 Tech / Life 之间交替"""
    def _make(count, categories=("Tech", "Life")):
        return [
            Article(id=str(i), title=f"Article {i}", content=f"Body of article {i}",
                    author=f"author{i % 3}", category=categories[(i - 1) % len(categories)],
                    date="2024-01-15T10:30:00Z")
            for i in range(1, count + 1)
        ]
    return _make


@pytest.fixture
def make_categories():
    def _make(*names):
        return [Category(id=str(i), name=name, description=f"{name} posts")
                for i, name in enumerate(names, start=1)]
    return _make
