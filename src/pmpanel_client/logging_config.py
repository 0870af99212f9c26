"""
日志配置

按配置文件的 log 段初始化根日志记录器：始终输出到控制台，
配置了 file 时再追加一个按大小轮转的日志文件。
"""

import logging
import logging.handlers
import os

from .models import LogConfig

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MAX_LOG_BYTES = 100 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def setup_logging(
    log_config: LogConfig,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUP_COUNT
) -> logging.Logger:
    """
    根据 LogConfig 配置根日志记录器

    重复调用会替换上一次安装的处理器。

    Args:
        log_config: ConfigManager 加载出的日志配置
        max_bytes: 单个日志文件的轮转阈值（字节）
        backup_count: 保留的轮转文件数量

    Returns:
        logging.Logger: 根日志记录器

    Raises:
        IOError: 日志文件或其目录无法创建
    """
    # LogConfig 已把级别规范为大写，WARN 是 logging.WARNING 的别名
    level = logging.WARNING if log_config.level == "WARN" else getattr(logging, log_config.level)

    handlers = [logging.StreamHandler()]
    if log_config.file:
        handlers.append(_file_handler(log_config.file, max_bytes, backup_count))

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    root_logger.info(f"Logging to console{' and ' + log_config.file if log_config.file else ''} at {log_config.level}")
    return root_logger


def _file_handler(path: str, max_bytes: int, backup_count: int) -> logging.Handler:
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        return logging.handlers.RotatingFileHandler(
            filename=path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
    except OSError as e:
        raise IOError(f"Failed to open log file {path}: {e}")
