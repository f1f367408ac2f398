# blog_portal/utils/date_utils.py
from datetime import datetime
from typing import Optional, Union

from dateutil import parser as dateutil_parser


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """解析服务端返回的 ISO 时间串 (如 2024-01-15T10:30:00Z)，失败返回 None"""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return dateutil_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def format_date_long(value: Union[str, datetime, None]) -> str:
    """
    格式化为长日期，例如 "January 5, 2024"。

    无法解析时原样返回输入字符串 (None 返回空串)。
    """
    dt = parse_datetime(value)
    if dt is None:
        return str(value or "")
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def format_date_short(value: Union[str, datetime, None], with_time: bool = False) -> str:
    """
    格式化为短日期，例如 "Jan 5, 2024"；with_time 时追加 ", 10:30 AM"。
    """
    dt = parse_datetime(value)
    if dt is None:
        return str(value or "")
    text = f"{dt.strftime('%b')} {dt.day}, {dt.year}"
    if with_time:
        hour = dt.hour % 12 or 12
        text += f", {hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"
    return text
