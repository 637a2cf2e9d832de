"""
Hub 服务器模块

连接广播中心：
- 服务器实现
- 协调器与事件邮箱
- 连接管理
"""

from .server import HubServer, start_hub_server
from .coordinator import Hub, HubStats
from .connection import Connection
from .events import Broadcast, Event, EventType, Mailbox, Register, Unregister
from .registry import ConnectionRegistry

__all__ = [
    "HubServer",
    "start_hub_server",
    "Hub",
    "HubStats",
    "Connection",
    "ConnectionRegistry",
    "Mailbox",
    "Event",
    "EventType",
    "Register",
    "Unregister",
    "Broadcast",
]
