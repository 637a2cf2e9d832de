"""
存储模块

房间与聊天记录的内存存储，以及写入后发布通知的服务。
"""

from .models import Chat, ChatStore, Room, RoomStore
from .service import ChatRoomService

__all__ = [
    "Room",
    "Chat",
    "RoomStore",
    "ChatStore",
    "ChatRoomService",
]
