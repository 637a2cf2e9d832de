"""Hub 协调器

单一协调任务独占连接注册表：注册、注销和广播都通过邮箱排队，
由该任务逐个处理，因此注册表不需要锁。
"""

import asyncio
import concurrent.futures
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .connection import Connection
from .events import Broadcast, Event, Mailbox, Register, Unregister
from .registry import ConnectionRegistry
from ..exceptions import HubClosedError, HubError
from ..protocol import Payload, encode_payload
from ..utils import get_logger


@dataclass
class HubStats:
    """Hub 运行计数"""

    registered: int = 0
    unregistered: int = 0
    broadcasts: int = 0
    deliveries: int = 0
    evictions: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class Hub:
    """连接广播中心

    Usage:
        hub = Hub()
        hub.start()
        reader = await hub.accept(websocket)
        await hub.broadcast(Notification.ROOM_CREATED)
    """

    def __init__(self, mailbox_size: int = 1024, send_timeout: Optional[float] = 5.0):
        """
        Args:
            mailbox_size: 邮箱容量，满时生产者等待
            send_timeout: 单个连接发送的超时秒数，None 表示不限时
        """
        self.registry = ConnectionRegistry()
        self.mailbox = Mailbox(mailbox_size)
        self.send_timeout = send_timeout
        self.stats = HubStats()

        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._closed = False

        self.logger = get_logger("roomcast.hub.coordinator")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    # ===========================================
    # 生命周期
    # ===========================================

    def start(self) -> asyncio.Task:
        """启动协调任务，重复调用返回同一个任务

        必须在事件循环中调用。启动前投递的事件会按顺序被处理。
        """
        if self._closed:
            raise HubClosedError()
        if self.running:
            return self._task

        self._loop = asyncio.get_running_loop()
        self._task = self._loop.create_task(self.run(), name="roomcast-hub")
        self.logger.info("Hub 协调任务已启动")
        return self._task

    async def stop(self, drain: bool = True, timeout: Optional[float] = 5.0) -> None:
        """停止协调任务并关闭所有连接

        已注册的连接和仍在邮箱中等待注册或注销的连接都会被关闭。

        Args:
            drain: 是否先处理完邮箱中已有的事件
            timeout: 等待邮箱清空的最长秒数
        """
        if self._closed:
            return
        self._closed = True

        if drain and self.running:
            try:
                await asyncio.wait_for(self.mailbox.join(), timeout)
            except asyncio.TimeoutError:
                self.logger.warning(
                    f"停止时仍有 {self.mailbox.qsize()} 个事件未处理，直接丢弃"
                )

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        # 协调任务已结束，此处可以安全地清空注册表和邮箱
        connections = self.registry.clear()
        pending = self.mailbox.drain_nowait()
        for event in pending:
            if isinstance(event, (Register, Unregister)):
                connections.append(event.connection)
        if pending:
            self.logger.warning(f"丢弃 {len(pending)} 个未处理的事件")

        connections = list(dict.fromkeys(connections))
        await asyncio.gather(
            *(self._close(conn, 1001, "Server shutdown") for conn in connections)
        )
        self.logger.info(f"Hub 已停止，关闭 {len(connections)} 个连接")

    async def run(self) -> None:
        """协调循环：逐个处理邮箱中的事件

        单个事件的异常只记录日志，循环不会因此退出。
        """
        while True:
            event = await self.mailbox.get()
            try:
                await self._dispatch(event)
            except Exception:
                self.stats.errors += 1
                self.logger.exception(f"处理事件失败: {event!r}")
            finally:
                self.mailbox.task_done()

    # ===========================================
    # 生产者接口
    # ===========================================

    async def register(self, connection: Connection) -> None:
        """请求把连接加入注册表"""
        await self._post(Register(connection))

    async def unregister(self, connection: Connection) -> None:
        """请求把连接移出注册表并关闭"""
        await self._post(Unregister(connection))

    async def broadcast(self, payload: Payload) -> None:
        """请求向所有已注册连接发送 payload

        投递后立即返回，不等待发送完成。

        Raises:
            PayloadError: payload 无法编码为文本帧
            HubClosedError: Hub 已停止
        """
        await self._post(Broadcast(encode_payload(payload)))

    def broadcast_threadsafe(self, payload: Payload) -> concurrent.futures.Future:
        """在其他线程中请求广播，不阻塞调用线程

        Returns:
            投递完成时结束的 Future

        Raises:
            HubError: Hub 尚未启动
        """
        if self._loop is None:
            raise HubError("Hub has not been started")
        return asyncio.run_coroutine_threadsafe(self.broadcast(payload), self._loop)

    async def accept(self, websocket: Any) -> asyncio.Task:
        """接入一个已升级的 websocket

        投递 Register 并为该连接启动读取任务。读取任务结束前会投递
        一次 Unregister。

        Returns:
            读取任务
        """
        connection = Connection(websocket)
        await self.register(connection)
        return asyncio.create_task(
            self._read_until_closed(connection), name=f"roomcast-reader-{connection.id}"
        )

    async def flush(self) -> None:
        """等待目前已投递的事件全部处理完"""
        await self.mailbox.join()

    async def _post(self, event: Event) -> None:
        if self._closed:
            raise HubClosedError()
        await self.mailbox.put(event)

    # ===========================================
    # 读取任务
    # ===========================================

    async def _read_until_closed(self, connection: Connection) -> None:
        try:
            await connection.drain()
        except Exception as e:
            self.logger.warning(f"读取连接 {connection.id} 失败: {e}")
        finally:
            if self._closed:
                await connection.close(1001, "Server shutdown")
            else:
                await self.unregister(connection)

    # ===========================================
    # 事件处理（仅在协调任务中执行）
    # ===========================================

    async def _dispatch(self, event: Event) -> None:
        if isinstance(event, Register):
            self._handle_register(event.connection)
        elif isinstance(event, Unregister):
            await self._handle_unregister(event.connection)
        elif isinstance(event, Broadcast):
            await self._handle_broadcast(event.payload)
        else:
            raise HubError(f"Unknown event: {event!r}")

    def _handle_register(self, connection: Connection) -> None:
        if self.registry.add(connection):
            self.stats.registered += 1
            self.logger.info(
                f"连接加入: {connection.id} {connection.remote_address} "
                f"(当前 {len(self.registry)})"
            )
        else:
            self.logger.debug(f"连接 {connection.id} 已注册，忽略")

    async def _handle_unregister(self, connection: Connection) -> None:
        if self.registry.remove(connection):
            self.stats.unregistered += 1
            self.logger.info(
                f"连接断开: {connection.id} (当前 {len(self.registry)})"
            )
        # 无论是否在注册表中都要确保底层连接释放
        await self._close(connection)

    async def _handle_broadcast(self, frame: str) -> None:
        self.stats.broadcasts += 1
        targets: List[Connection] = list(self.registry)
        if not targets:
            self.logger.debug(f"没有广播目标: {frame!r}")
            return

        results = await asyncio.gather(
            *(self._deliver(conn, frame) for conn in targets), return_exceptions=True
        )

        failed: List[Connection] = []
        for connection, result in zip(targets, results):
            if isinstance(result, BaseException):
                self._evict(connection, result)
                failed.append(connection)
            else:
                self.stats.deliveries += 1

        if failed:
            await asyncio.gather(
                *(self._close(conn, 1011, "Send failed") for conn in failed)
            )

        self.logger.debug(
            f"广播完成 {frame!r}: 成功 {len(targets) - len(failed)}，失败 {len(failed)}"
        )

    async def _deliver(self, connection: Connection, frame: str) -> None:
        if self.send_timeout is None:
            await connection.send(frame)
        else:
            await asyncio.wait_for(connection.send(frame), self.send_timeout)

    def _evict(self, connection: Connection, error: BaseException) -> None:
        self.registry.remove(connection)
        self.stats.evictions += 1
        reason = "send timeout" if isinstance(error, asyncio.TimeoutError) else repr(error)
        self.logger.warning(f"发送失败，移除连接 {connection.id}: {reason}")

    async def _close(self, connection: Connection, code: int = 1000, reason: str = "") -> None:
        """关闭连接，关闭握手与发送共用同一个超时"""
        try:
            if self.send_timeout is None:
                await connection.close(code, reason)
            else:
                await asyncio.wait_for(connection.close(code, reason), self.send_timeout)
        except asyncio.TimeoutError:
            self.logger.warning(f"关闭连接 {connection.id} 超时，放弃等待关闭握手")

    # ===========================================
    # 查询
    # ===========================================

    def get_stats(self) -> Dict[str, Any]:
        """获取 Hub 统计信息"""
        return {
            "running": self.running,
            "connections": len(self.registry),
            "pending_events": self.mailbox.qsize(),
            **self.stats.to_dict(),
        }
