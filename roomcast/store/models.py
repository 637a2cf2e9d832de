"""房间与聊天记录的内存存储"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Room:
    """聊天房间"""

    id: str
    name: str
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class Chat:
    """房间中的一条消息"""

    id: str
    room_id: str
    username: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "room_id": self.room_id,
            "username": self.username,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }


class RoomStore:
    """房间存储，按 id 索引"""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def get_rooms(self) -> List[Room]:
        """按创建时间排序返回所有房间"""
        with self._lock:
            rooms = list(self._rooms.values())
        return sorted(rooms, key=lambda room: room.created_at)

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def add_room(self, room: Room) -> None:
        with self._lock:
            self._rooms[room.id] = room

    def update_room(self, room: Room) -> bool:
        """更新已有房间，不存在时返回 False"""
        with self._lock:
            if room.id not in self._rooms:
                return False
            self._rooms[room.id] = room
            return True

    def delete_room(self, room_id: str) -> bool:
        with self._lock:
            return self._rooms.pop(room_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)


class ChatStore:
    """聊天记录存储

    除主索引外维护按房间的二级索引，房间内保持插入顺序。
    """

    def __init__(self):
        self._chats: Dict[str, Chat] = {}
        self._chats_by_room: Dict[str, List[Chat]] = {}
        self._lock = threading.Lock()

    def get_chats(self) -> List[Chat]:
        with self._lock:
            return list(self._chats.values())

    def get_chat(self, chat_id: str) -> Optional[Chat]:
        with self._lock:
            return self._chats.get(chat_id)

    def get_chats_by_room(self, room_id: str) -> List[Chat]:
        """返回房间内消息的副本"""
        with self._lock:
            return list(self._chats_by_room.get(room_id, []))

    def add_chat(self, chat: Chat) -> None:
        with self._lock:
            previous = self._chats.get(chat.id)
            if previous is not None:
                self._remove_from_room_index(previous)
            self._chats[chat.id] = chat
            self._chats_by_room.setdefault(chat.room_id, []).append(chat)

    def delete_chat(self, chat_id: str) -> bool:
        with self._lock:
            chat = self._chats.pop(chat_id, None)
            if chat is None:
                return False
            self._remove_from_room_index(chat)
            return True

    def delete_chats_by_room(self, room_id: str) -> int:
        """删除房间内全部消息

        Returns:
            删除的条数
        """
        with self._lock:
            chats = self._chats_by_room.pop(room_id, [])
            for chat in chats:
                self._chats.pop(chat.id, None)
            return len(chats)

    def _remove_from_room_index(self, chat: Chat) -> None:
        room_chats = self._chats_by_room.get(chat.room_id, [])
        self._chats_by_room[chat.room_id] = [c for c in room_chats if c.id != chat.id]
        if not self._chats_by_room[chat.room_id]:
            del self._chats_by_room[chat.room_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._chats)
