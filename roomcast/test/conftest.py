"""测试共用的假 websocket 与 Hub fixture"""

import asyncio
from typing import List, Optional

import pytest

from roomcast.hub import Hub
from roomcast.utils import disable_logging


class FakeWebSocket:
    """内存中的服务端 websocket

    send 记录发出的帧；对端消息通过 feed / peer_close / peer_error 注入。
    """

    _counter = 0

    def __init__(
        self,
        fail_with: Optional[BaseException] = None,
        delay: float = 0.0,
        close_delay: float = 0.0,
    ):
        FakeWebSocket._counter += 1
        self.id = f"fake-{FakeWebSocket._counter}"
        self.remote_address = ("127.0.0.1", 40000 + FakeWebSocket._counter)
        self.sent: List[str] = []
        self.close_calls = 0
        self.fail_with = fail_with
        self.delay = delay
        self.close_delay = close_delay
        self._inbox: asyncio.Queue = asyncio.Queue()

    async def send(self, frame: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(frame)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.close_calls += 1
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        self._inbox.put_nowait(None)

    def feed(self, message: str) -> None:
        self._inbox.put_nowait(message)

    def peer_close(self) -> None:
        self._inbox.put_nowait(None)

    def peer_error(self, error: BaseException) -> None:
        self._inbox.put_nowait(error)

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        while True:
            item = await self._inbox.get()
            if item is None:
                return
            if isinstance(item, BaseException):
                raise item
            yield item


@pytest.fixture(autouse=True)
def quiet_logging():
    disable_logging()
    yield


@pytest.fixture
async def hub():
    hub = Hub(mailbox_size=64, send_timeout=0.5)
    hub.start()
    yield hub
    await hub.stop()


@pytest.fixture
def make_ws():
    return FakeWebSocket
