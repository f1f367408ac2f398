# blog_portal/utils/logger.py
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

# 全局日志记录器名称
LOGGER_NAME = "blog_portal"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def default_log_dir() -> str:
    """项目根目录下的 logs 目录 (本文件位于 blog_portal/utils/logger.py)"""
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(project_root, 'logs')


def setup_logging(log_level: int = logging.INFO, log_dir: Optional[str] = None,
                  backup_count: int = 7, when: str = 'D', interval: int = 1,
                  to_file: bool = True) -> logging.Logger:
    """
    配置全局日志记录器。

    Args:
        log_level: 日志记录级别 (例如 logging.DEBUG, logging.INFO).
        log_dir: 日志目录，默认为项目根目录下的 logs/.
        backup_count: 保留的备份日志文件数量.
        when: 轮转间隔类型 ('S', 'M', 'H', 'D', 'midnight'). 默认为 'D' (天).
        interval: 轮转间隔数量. 默认为 1.
        to_file: 是否写入日志文件 (测试时可关闭).

    Returns:
        配置好的 Logger 对象.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # 防止重复添加 handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    log_file = None
    if to_file:
        log_dir = log_dir or default_log_dir()
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, 'blog_portal.log')
        # 文件处理器 (按时间滚动日志)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when=when,
            interval=interval,
            backupCount=backup_count,
            encoding='utf-8',
            utc=False
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 控制台处理器
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    logger.info(f"日志系统已初始化。日志级别: {logging.getLevelName(log_level)}, 日志文件: {log_file or '无'}")
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    获取指定名称的日志记录器。

    Args:
        name: 日志记录器的名称。子模块使用 'blog_portal.xxx' 以继承全局配置。
    """
    return logging.getLogger(name)


def level_from_name(name: Optional[str], default: int = logging.INFO) -> int:
    """将 'DEBUG' / 'info' 等级别名转换为 logging 常量，无法识别时返回默认值"""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default
