"""房间/聊天服务

写入存储成功后向 Hub 投递对应的通知。
"""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from .models import Chat, ChatStore, Room, RoomStore
from ..exceptions import HubClosedError, RoomNotFoundError, ValidationError
from ..hub import Hub
from ..protocol import Notification
from ..utils import get_logger


class ChatRoomService:
    """房间与聊天的写入入口"""

    def __init__(
        self,
        hub: Hub,
        rooms: Optional[RoomStore] = None,
        chats: Optional[ChatStore] = None,
    ):
        self.hub = hub
        self.rooms = rooms or RoomStore()
        self.chats = chats or ChatStore()
        self.logger = get_logger("roomcast.store.service")

    async def create_room(self, name: str) -> Room:
        """创建房间并广播 new-room

        Hub 已停止时房间照常创建，通知只记录日志后丢弃。

        Raises:
            ValidationError: 房间名为空
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Room name is required", {"field": "name"})

        room = Room(id=str(uuid.uuid4()), name=name)
        self.rooms.add_room(room)
        self.logger.info(f"创建房间: {room.name} ({room.id})")

        await self._notify(Notification.ROOM_CREATED)
        return room

    async def post_chat(self, room_id: str, username: str, message: str) -> Chat:
        """在房间中发送消息并广播 new-chat

        Hub 已停止时消息照常保存，通知只记录日志后丢弃。

        Raises:
            RoomNotFoundError: 房间不存在
            ValidationError: 用户名或消息为空
        """
        if self.rooms.get_room(room_id) is None:
            raise RoomNotFoundError(room_id)

        username = (username or "").strip()
        message = (message or "").strip()
        if not username or not message:
            raise ValidationError(
                "Username and message are required", {"room_id": room_id}
            )

        chat = Chat(
            id=str(uuid.uuid4()),
            room_id=room_id,
            username=username,
            message=message,
        )
        self.chats.add_chat(chat)
        self.logger.debug(f"{username} 在房间 {room_id} 发言")

        await self._notify(Notification.CHAT_POSTED)
        return chat

    async def _notify(self, notification: Notification) -> None:
        # 写入已生效，Hub 停止时只丢弃通知
        try:
            await self.hub.broadcast(notification)
        except HubClosedError:
            self.logger.warning(f"Hub 已停止，未发送通知: {notification.value}")

    def delete_room(self, room_id: str) -> bool:
        """删除房间及其全部消息，不发送通知"""
        if not self.rooms.delete_room(room_id):
            return False
        removed = self.chats.delete_chats_by_room(room_id)
        self.logger.info(f"删除房间 {room_id}，清理 {removed} 条消息")
        return True

    def list_rooms(self) -> List[Room]:
        return self.rooms.get_rooms()

    def list_chats(self, room_id: str) -> List[Chat]:
        """
        Raises:
            RoomNotFoundError: 房间不存在
        """
        if self.rooms.get_room(room_id) is None:
            raise RoomNotFoundError(room_id)
        return self.chats.get_chats_by_room(room_id)

    def seed_sample_data(self) -> None:
        """写入演示用的房间和消息，不广播"""
        now = datetime.now()

        self.rooms.add_room(
            Room(id="1", name="General", created_at=now - timedelta(hours=24))
        )
        self.rooms.add_room(
            Room(id="2", name="Technology", created_at=now - timedelta(hours=2))
        )

        self.chats.add_chat(
            Chat(
                id="1",
                room_id="1",
                username="Alice",
                message="Hello everyone!",
                created_at=now - timedelta(minutes=20),
            )
        )
        self.chats.add_chat(
            Chat(
                id="2",
                room_id="1",
                username="Bob",
                message="Hi Alice, how are you?",
                created_at=now - timedelta(minutes=15),
            )
        )
        self.chats.add_chat(
            Chat(
                id="3",
                room_id="2",
                username="Charlie",
                message="Anyone interested in Python programming?",
                created_at=now - timedelta(minutes=5),
            )
        )
        self.logger.info("已写入示例数据")
