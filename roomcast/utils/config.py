"""Roomcast 配置管理

本模块提供统一的配置管理接口，支持环境变量、默认值和运行时配置。
配置优先级：环境变量 > 运行时设置 > 默认值
"""

import os
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field, fields

from ..exceptions import InvalidConfigurationError


@dataclass
class RoomcastConfig:
    """Roomcast 配置类

    包含服务器、Hub、日志等组件的配置选项。
    """

    # 服务器配置
    host: str = "localhost"
    port: int = 8080
    ws_path: str = "/ws"
    health_path: str = "/healthz"

    # WebSocket 配置
    ws_ping_interval: Optional[float] = 20.0
    ws_ping_timeout: Optional[float] = 20.0
    ws_close_timeout: float = 10.0

    # Hub 配置
    mailbox_size: int = 1024
    send_timeout: Optional[float] = 5.0

    # 日志配置
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    enable_rich_logging: bool = True

    # 示例数据
    seed_sample_data: bool = False

    # 自定义配置
    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "RoomcastConfig":
        """从环境变量创建配置

        环境变量格式：ROOMCAST_<配置名大写>，未设置的项保留默认值。

        Returns:
            从环境变量读取的配置实例

        Raises:
            InvalidConfigurationError: 数值或布尔值无法解析
        """
        config = cls()

        # 服务器配置
        config.host = os.getenv("ROOMCAST_HOST", config.host)
        config.port = _read_env("ROOMCAST_PORT", int, config.port)
        config.ws_path = os.getenv("ROOMCAST_WS_PATH", config.ws_path)
        config.health_path = os.getenv("ROOMCAST_HEALTH_PATH", config.health_path)

        # WebSocket 配置
        config.ws_ping_interval = _read_env(
            "ROOMCAST_WS_PING_INTERVAL", _optional_float, config.ws_ping_interval
        )
        config.ws_ping_timeout = _read_env(
            "ROOMCAST_WS_PING_TIMEOUT", _optional_float, config.ws_ping_timeout
        )
        config.ws_close_timeout = _read_env(
            "ROOMCAST_WS_CLOSE_TIMEOUT", float, config.ws_close_timeout
        )

        # Hub 配置
        config.mailbox_size = _read_env(
            "ROOMCAST_MAILBOX_SIZE", int, config.mailbox_size
        )
        config.send_timeout = _read_env(
            "ROOMCAST_SEND_TIMEOUT", _optional_float, config.send_timeout
        )

        # 日志配置
        config.log_level = os.getenv("ROOMCAST_LOG_LEVEL", config.log_level).upper()
        config.log_format = os.getenv("ROOMCAST_LOG_FORMAT", config.log_format)
        config.log_file = os.getenv("ROOMCAST_LOG_FILE", config.log_file)
        config.enable_rich_logging = _read_env(
            "ROOMCAST_ENABLE_RICH_LOGGING", _parse_bool, config.enable_rich_logging
        )

        config.seed_sample_data = _read_env(
            "ROOMCAST_SEED_SAMPLE_DATA", _parse_bool, config.seed_sample_data
        )

        config.validate()
        return config

    def validate(self) -> None:
        """校验配置取值

        Raises:
            InvalidConfigurationError: 取值超出允许范围
        """
        if not 0 <= self.port <= 65535:
            raise InvalidConfigurationError("port", str(self.port))
        if self.mailbox_size < 1:
            raise InvalidConfigurationError("mailbox_size", str(self.mailbox_size))
        if self.send_timeout is not None and self.send_timeout <= 0:
            raise InvalidConfigurationError("send_timeout", str(self.send_timeout))
        if not self.ws_path.startswith("/"):
            raise InvalidConfigurationError("ws_path", self.ws_path)

    def update(self, **kwargs) -> None:
        """更新配置项

        Args:
            **kwargs: 要更新的配置项，未知项存入 custom
        """
        for key, value in kwargs.items():
            if key != "custom" and hasattr(self, key):
                setattr(self, key, value)
            else:
                self.custom[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """获取配置项

        Args:
            key: 配置项名称
            default: 默认值

        Returns:
            配置项的值
        """
        if key != "custom" and hasattr(self, key):
            return getattr(self, key)
        return self.custom.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典

        Returns:
            配置的字典表示（自定义项平铺在末尾）
        """
        result = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "custom"}
        result.update(self.custom)
        return result


def _read_env(key: str, parse: Callable[[str], Any], default: Any) -> Any:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        raise InvalidConfigurationError(key, raw) from None


def _optional_float(raw: str) -> Optional[float]:
    # "none" / "off" 表示关闭该超时
    if raw.lower() in {"none", "off"}:
        return None
    return float(raw)


def _parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(raw)


# 全局配置实例
_global_config: Optional[RoomcastConfig] = None


def get_config() -> RoomcastConfig:
    """获取全局配置

    如果配置尚未初始化，则从环境变量创建默认配置。

    Returns:
        全局配置实例
    """
    global _global_config
    if _global_config is None:
        _global_config = RoomcastConfig.from_env()
    return _global_config


def set_config(config: RoomcastConfig) -> None:
    """设置全局配置

    Args:
        config: 新的配置实例
    """
    global _global_config
    _global_config = config


def update_config(**kwargs) -> None:
    """更新全局配置

    Args:
        **kwargs: 要更新的配置项
    """
    config = get_config()
    config.update(**kwargs)


def reset_config() -> None:
    """重置全局配置

    清除当前配置，下次调用 get_config() 时会重新从环境变量读取。
    """
    global _global_config
    _global_config = None
