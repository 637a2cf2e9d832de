"""Roomcast 日志系统

本模块提供统一的日志接口，支持标准日志和富文本日志。
所有模块日志器都挂在 "roomcast" 根日志器下，只有根日志器需要配置 handler。
"""

import logging
import sys
from typing import Optional

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "roomcast"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_rich: bool = True,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """设置日志器

    创建并配置一个日志器实例。支持控制台输出和文件输出。

    Args:
        name: 日志器名称
        level: 日志级别
        log_file: 日志文件路径，None 表示不写文件
        enable_rich: 是否使用 rich 控制台输出
        log_format: 标准处理器使用的格式

    Returns:
        配置好的日志器
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    # 清除现有处理器，避免重复输出
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if enable_rich:
        rich_handler = RichHandler(
            rich_tracebacks=True, show_time=True, show_level=True, show_path=True
        )
        rich_handler.setLevel(level.upper())
        logger.addHandler(rich_handler)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.upper())
        console_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level.upper())
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """获取日志器

    子日志器通过继承根日志器的配置输出，不单独挂 handler。

    Args:
        name: 日志器名称，不以 "roomcast" 开头时自动加前缀

    Returns:
        日志器实例
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(config=None) -> logging.Logger:
    """按配置初始化根日志器

    Args:
        config: RoomcastConfig，默认使用全局配置

    Returns:
        根日志器
    """
    if config is None:
        from .config import get_config

        config = get_config()

    return setup_logger(
        ROOT_LOGGER_NAME,
        level=config.log_level,
        log_file=config.log_file,
        enable_rich=config.enable_rich_logging,
        log_format=config.log_format,
    )


def disable_logging() -> None:
    """关闭 roomcast 的全部日志输出"""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.setLevel(logging.CRITICAL + 1)
