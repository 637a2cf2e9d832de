"""Roomcast 工具模块

提供基础设施支持：
- 配置管理 (RoomcastConfig, get_config, update_config)
- 日志系统 (setup_logger, get_logger)
- 便捷函数 (configure_logging)
"""

from .config import (
    RoomcastConfig,
    get_config,
    set_config,
    update_config,
    reset_config,
)

from .logger import (
    setup_logger,
    get_logger,
    # 便捷函数
    configure_logging,
    disable_logging,
)

__all__ = [
    # 配置管理
    "RoomcastConfig",
    "get_config",
    "set_config",
    "update_config",
    "reset_config",
    # 日志系统
    "setup_logger",
    "get_logger",
    # 便捷函数
    "configure_logging",
    "disable_logging",
]
