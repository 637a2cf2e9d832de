"""Hub 客户端连接"""

import uuid
from typing import Any, Optional

from websockets.exceptions import ConnectionClosed

from ..exceptions import ConnectionClosedError
from ..utils import get_logger


class Connection:
    """一条已升级的双向连接

    Hub 运行期间只有协调任务会关闭它；读取任务只用它来发现对端断开。
    以对象身份做哈希，同一个 websocket 包装两次得到两个不同的连接。
    """

    def __init__(self, websocket: Any, connection_id: Optional[str] = None):
        self.websocket = websocket
        self.id = connection_id or str(getattr(websocket, "id", None) or uuid.uuid4())
        self.remote_address = getattr(websocket, "remote_address", None)
        self._closed = False
        self.logger = get_logger("roomcast.hub.connection")

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, frame: str) -> None:
        """发送一个文本帧

        Raises:
            ConnectionClosedError: 本端已关闭
            websockets.exceptions.ConnectionClosed: 对端已断开
        """
        if self._closed:
            raise ConnectionClosedError(self.id)
        await self.websocket.send(frame)

    async def close(self, code: int = 1000, reason: str = "") -> bool:
        """关闭连接，重复关闭是空操作

        Returns:
            本次调用是否真正执行了关闭
        """
        if self._closed:
            return False
        self._closed = True
        try:
            await self.websocket.close(code, reason)
        except Exception as e:
            # 底层连接可能已经断开，释放资源即可
            self.logger.debug(f"关闭连接 {self.id} 时出错: {e}")
        return True

    async def drain(self) -> None:
        """读取并丢弃对端发来的帧，直到对端关闭或出错"""
        try:
            async for _ in self.websocket:
                pass
        except ConnectionClosed as e:
            self.logger.debug(f"连接 {self.id} 已断开: {e}")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Connection {self.id} {self.remote_address} {state}>"
