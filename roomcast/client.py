"""Roomcast 通知客户端"""

from typing import AsyncIterator, Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosedOK

from .exceptions import PayloadError
from .protocol import Notification
from .utils import get_logger


class NotificationListener:
    """订阅 Hub 的通知

    Usage:
        async with NotificationListener("ws://localhost:8080/ws") as listener:
            async for notification in listener:
                print(notification.value)
    """

    def __init__(self, url: str, open_timeout: Optional[float] = 10.0):
        self.url = url
        self.open_timeout = open_timeout
        self.websocket: Optional[ClientConnection] = None
        self.logger = get_logger("roomcast.client")

    async def connect(self) -> None:
        """连接到 Hub"""
        if self.websocket is not None:
            return
        self.websocket = await connect(self.url, open_timeout=self.open_timeout)
        self.logger.info(f"已连接: {self.url}")

    async def disconnect(self) -> None:
        """断开连接"""
        if self.websocket is None:
            return
        websocket, self.websocket = self.websocket, None
        await websocket.close()
        self.logger.info(f"已断开: {self.url}")

    async def receive(self) -> Notification:
        """等待下一条通知

        Raises:
            PayloadError: 收到未知令牌
            websockets.exceptions.ConnectionClosed: 连接已关闭
        """
        if self.websocket is None:
            await self.connect()
        frame = await self.websocket.recv()
        return Notification.from_wire(frame)

    async def __aenter__(self) -> "NotificationListener":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def __aiter__(self) -> AsyncIterator[Notification]:
        """逐条产出通知，服务器正常关闭时结束；未知令牌记录后跳过"""
        while True:
            try:
                yield await self.receive()
            except ConnectionClosedOK:
                return
            except PayloadError as e:
                self.logger.warning(f"忽略未知通知: {e.message}")
