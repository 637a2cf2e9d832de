"""Hub 事件与邮箱

所有对注册表的修改和广播都以事件形式进入同一个邮箱，由协调任务按到达顺序处理。
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .connection import Connection
from ..utils import get_logger


class EventType(Enum):
    """事件类型枚举"""

    REGISTER = "register"
    UNREGISTER = "unregister"
    BROADCAST = "broadcast"


@dataclass(frozen=True)
class Register:
    """加入注册表"""

    connection: Connection
    event_type = EventType.REGISTER


@dataclass(frozen=True)
class Unregister:
    """移出注册表并关闭连接"""

    connection: Connection
    event_type = EventType.UNREGISTER


@dataclass(frozen=True)
class Broadcast:
    """向所有已注册连接发送一帧"""

    payload: str
    event_type = EventType.BROADCAST


Event = Union[Register, Unregister, Broadcast]


class Mailbox:
    """有界 FIFO 邮箱

    满时阻塞生产者，事件不会被丢弃。
    """

    def __init__(self, maxsize: int = 1024):
        self.maxsize = maxsize
        self._queue: "asyncio.Queue[Event]" = asyncio.Queue(maxsize=maxsize)
        # 每次邮箱被填满只告警一次，清空后复位
        self._full_warned = False
        self.logger = get_logger("roomcast.hub.mailbox")

    async def put(self, event: Event) -> None:
        """投递事件，邮箱满时等待空位"""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            if not self._full_warned:
                self._full_warned = True
                self.logger.warning(
                    f"邮箱已满 ({self.maxsize})，{event.event_type.value} 事件等待投递"
                )
            await self._queue.put(event)

    async def get(self) -> Event:
        event = await self._queue.get()
        if self._queue.empty():
            self._full_warned = False
        return event

    def drain_nowait(self) -> List[Event]:
        """取出邮箱中剩余的全部事件，不等待

        取出的事件视为已处理，join 的等待者会随之返回。
        """
        events: List[Event] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
        self._full_warned = False
        return events

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        """等待已投递的事件全部处理完"""
        await self._queue.join()

    def qsize(self) -> int:
        return self._queue.qsize()
