"""
Roomcast - room/chat change notification hub

Broadcasts "new-room" / "new-chat" notifications to every connected
WebSocket client through a single coordinating hub task.
"""

__version__ = "1.0.0"
__description__ = "Room/chat change notification hub over WebSockets"

# Protocol core
from .protocol import Notification, encode_payload

# Hub server
from .hub import (
    Hub,
    HubServer,
    HubStats,
    Connection,
    ConnectionRegistry,
    start_hub_server,
)

# Stores
from .store import ChatRoomService, RoomStore, ChatStore, Room, Chat

# Client
from .client import NotificationListener

# Utilities
from .utils import RoomcastConfig, get_config, configure_logging, get_logger

# Exceptions
from .exceptions import (
    RoomcastError,
    HubError,
    HubClosedError,
    ConnectionClosedError,
    PayloadError,
    ValidationError,
    RoomNotFoundError,
    ConfigurationError,
    InvalidConfigurationError,
)

__all__ = [
    # Version info
    "__version__",
    "__description__",
    # Protocol core
    "Notification",
    "encode_payload",
    # Hub server
    "Hub",
    "HubServer",
    "HubStats",
    "Connection",
    "ConnectionRegistry",
    "start_hub_server",
    # Stores
    "ChatRoomService",
    "RoomStore",
    "ChatStore",
    "Room",
    "Chat",
    # Client
    "NotificationListener",
    # Utils
    "RoomcastConfig",
    "get_config",
    "configure_logging",
    "get_logger",
    # Exceptions
    "RoomcastError",
    "HubError",
    "HubClosedError",
    "ConnectionClosedError",
    "PayloadError",
    "ValidationError",
    "RoomNotFoundError",
    "ConfigurationError",
    "InvalidConfigurationError",
]


def create_hub(config: RoomcastConfig = None) -> Hub:
    """Create a hub configured from the given (or global) configuration."""
    config = config or get_config()
    return Hub(mailbox_size=config.mailbox_size, send_timeout=config.send_timeout)


def create_hub_server(host: str = None, port: int = None) -> HubServer:
    """Create a new hub server instance."""
    return HubServer(host=host, port=port)
