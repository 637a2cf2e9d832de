#!/usr/bin/env python3
"""测试房间/聊天存储与发布通知的服务"""

from datetime import datetime, timedelta

import pytest

from roomcast.exceptions import RoomNotFoundError, ValidationError
from roomcast.hub import Connection, Hub
from roomcast.store import Chat, ChatRoomService, ChatStore, Room, RoomStore


def test_room_store_crud():
    store = RoomStore()
    now = datetime.now()
    store.add_room(Room(id="b", name="Later", created_at=now))
    store.add_room(Room(id="a", name="Earlier", created_at=now - timedelta(hours=1)))

    assert [room.id for room in store.get_rooms()] == ["a", "b"]
    assert store.get_room("a").name == "Earlier"
    assert store.get_room("missing") is None

    assert store.update_room(Room(id="a", name="Renamed", created_at=now)) is True
    assert store.get_room("a").name == "Renamed"
    assert store.update_room(Room(id="zzz", name="Ghost")) is False

    assert store.delete_room("a") is True
    assert store.delete_room("a") is False
    assert len(store) == 1


def test_chat_store_room_index():
    store = ChatStore()
    store.add_chat(Chat(id="1", room_id="r1", username="alice", message="hi"))
    store.add_chat(Chat(id="2", room_id="r1", username="bob", message="yo"))
    store.add_chat(Chat(id="3", room_id="r2", username="carol", message="hey"))

    assert [chat.id for chat in store.get_chats_by_room("r1")] == ["1", "2"]
    assert store.get_chats_by_room("nope") == []
    assert store.get_chat("3").username == "carol"
    assert len(store.get_chats()) == 3

    # 返回的是副本
    store.get_chats_by_room("r1").clear()
    assert len(store.get_chats_by_room("r1")) == 2

    assert store.delete_chat("1") is True
    assert store.delete_chat("1") is False
    assert [chat.id for chat in store.get_chats_by_room("r1")] == ["2"]

    assert store.delete_chats_by_room("r1") == 1
    assert store.get_chat("2") is None
    assert len(store) == 1


def test_chat_store_replacing_chat_moves_index():
    store = ChatStore()
    store.add_chat(Chat(id="1", room_id="r1", username="alice", message="hi"))
    store.add_chat(Chat(id="1", room_id="r2", username="alice", message="moved"))

    assert store.get_chats_by_room("r1") == []
    assert [chat.message for chat in store.get_chats_by_room("r2")] == ["moved"]


def test_to_dict():
    created = datetime(2024, 1, 2, 3, 4, 5)
    chat = Chat(id="1", room_id="r", username="u", message="m", created_at=created)
    room = Room(id="r", name="General", created_at=created)

    assert chat.to_dict()["created_at"] == "2024-01-02T03:04:05"
    assert room.to_dict() == {
        "id": "r",
        "name": "General",
        "created_at": "2024-01-02T03:04:05",
    }


@pytest.fixture
async def listener(hub, make_ws):
    ws = make_ws()
    await hub.register(Connection(ws))
    return ws


async def test_create_room_broadcasts_after_commit(hub, listener):
    service = ChatRoomService(hub)

    room = await service.create_room("  Random  ")
    await hub.flush()

    assert room.name == "Random"
    assert service.rooms.get_room(room.id) is room
    assert listener.sent == ["new-room"]


async def test_create_room_requires_name(hub, listener):
    service = ChatRoomService(hub)

    with pytest.raises(ValidationError, match="Room name is required"):
        await service.create_room("   ")
    await hub.flush()

    assert service.list_rooms() == []
    assert listener.sent == []


async def test_post_chat_broadcasts(hub, listener):
    service = ChatRoomService(hub)
    room = await service.create_room("General")

    chat = await service.post_chat(room.id, "alice", "hello")
    await hub.flush()

    assert service.list_chats(room.id) == [chat]
    assert listener.sent == ["new-room", "new-chat"]


async def test_post_chat_validation(hub, listener):
    service = ChatRoomService(hub)
    room = await service.create_room("General")

    with pytest.raises(RoomNotFoundError) as exc_info:
        await service.post_chat("missing", "alice", "hello")
    assert exc_info.value.room_id == "missing"

    with pytest.raises(ValidationError, match="Username and message are required"):
        await service.post_chat(room.id, "alice", "")

    await hub.flush()
    assert listener.sent == ["new-room"]


async def test_delete_room_removes_chats(hub):
    service = ChatRoomService(hub)
    service.seed_sample_data()

    assert service.delete_room("1") is True
    assert service.delete_room("1") is False
    assert service.chats.get_chats_by_room("1") == []
    with pytest.raises(RoomNotFoundError):
        service.list_chats("1")


async def test_seed_sample_data_does_not_broadcast(hub, listener):
    service = ChatRoomService(hub)
    service.seed_sample_data()
    await hub.flush()

    assert [room.name for room in service.list_rooms()] == ["General", "Technology"]
    assert [chat.username for chat in service.list_chats("1")] == ["Alice", "Bob"]
    assert len(service.list_chats("2")) == 1
    assert listener.sent == []


async def test_writes_survive_a_stopped_hub():
    hub = Hub()
    hub.start()
    service = ChatRoomService(hub)
    await hub.stop()

    room = await service.create_room("General")
    chat = await service.post_chat(room.id, "alice", "hello")

    assert service.list_rooms() == [room]
    assert service.list_chats(room.id) == [chat]
