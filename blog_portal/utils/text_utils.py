# blog_portal/utils/text_utils.py
import math
import re

_TAG_RE = re.compile(r"<[^>]*>")

WORDS_PER_MINUTE = 200
CHARS_PER_MINUTE = 1000


def strip_html(content: str) -> str:
    """去除 HTML 标签"""
    return _TAG_RE.sub("", content or "")


def excerpt(content: str, max_length: int = 100) -> str:
    """去除标签后截断到 max_length，超长时追加 '...'"""
    clean = strip_html(content)
    if len(clean) > max_length:
        return clean[:max_length] + "..."
    return clean


def reading_time_minutes(content: str) -> int:
    """按每分钟 200 词估算阅读时间，至少 1 分钟"""
    words = strip_html(content).split()
    return max(1, math.ceil(len(words) / WORDS_PER_MINUTE))


def preview_read_time(content: str) -> str:
    """预览用的阅读时间文案: 每 1000 字符 1 分钟，至少 1 分钟"""
    minutes = max(1, math.ceil(len(content or "") / CHARS_PER_MINUTE))
    return f"{minutes} min read"


def content_to_html(content: str) -> str:
    """正文换行转为 <br/> 以便在富文本控件中显示"""
    return (content or "").replace("\n", "<br/>")
