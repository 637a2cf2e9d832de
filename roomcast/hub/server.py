"""Hub WebSocket 服务器"""

import asyncio
import json
from http import HTTPStatus
from typing import Any, Dict, Optional

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.http11 import Request, Response

from .coordinator import Hub
from ..utils import RoomcastConfig, get_config, get_logger


class HubServer:
    """Hub WebSocket 服务器

    只有一个升级路由（默认 /ws），另提供一个 JSON 健康检查路由。
    不做子协议协商和认证，允许任意来源。
    """

    def __init__(
        self,
        hub: Optional[Hub] = None,
        config: Optional[RoomcastConfig] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ):
        self.config = config or get_config()
        self.host = host if host is not None else self.config.host
        self._requested_port = port if port is not None else self.config.port

        # 核心组件
        self.hub = hub or Hub(
            mailbox_size=self.config.mailbox_size,
            send_timeout=self.config.send_timeout,
        )

        # 服务器状态
        self.server: Optional[Server] = None
        self.running = False

        self.logger = get_logger("roomcast.hub.server")

    @property
    def port(self) -> int:
        """实际监听端口（请求端口为 0 时由系统分配）"""
        if self.server is not None:
            for sock in self.server.sockets:
                return sock.getsockname()[1]
        return self._requested_port

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}{self.config.ws_path}"

    async def start(self) -> None:
        """启动服务器"""
        if self.running:
            self.logger.warning("服务器已经在运行")
            return

        self.logger.info(f"启动 Hub 服务器: {self.host}:{self._requested_port}")
        self.hub.start()

        try:
            self.server = await serve(
                self._handle_client,
                self.host,
                self._requested_port,
                process_request=self._process_request,
                ping_interval=self.config.ws_ping_interval,
                ping_timeout=self.config.ws_ping_timeout,
                close_timeout=self.config.ws_close_timeout,
                logger=self.logger,
            )
        except OSError as e:
            self.logger.error(f"启动服务器失败: {e}")
            await self.hub.stop(drain=False)
            raise

        self.running = True
        self.logger.info(f"Hub 服务器启动成功: {self.url}")

    async def stop(self) -> None:
        """停止服务器"""
        if not self.running:
            return

        self.logger.info("停止 Hub 服务器")
        self.running = False

        try:
            # 先停 Hub：关闭所有已注册连接，读取任务随之结束
            await self.hub.stop()
        finally:
            if self.server is not None:
                self.server.close()
                await self.server.wait_closed()
                self.server = None

        self.logger.info("Hub 服务器已停止")

    def _process_request(
        self, connection: ServerConnection, request: Request
    ) -> Optional[Response]:
        """升级前的路由

        返回 None 继续 WebSocket 握手，返回 Response 则直接应答 HTTP。
        """
        path = request.path.split("?", 1)[0]
        if path == self.config.ws_path:
            return None

        if path == self.config.health_path:
            body = json.dumps(self.get_stats()) + "\n"
            response = connection.respond(HTTPStatus.OK, body)
            # Headers 的赋值是追加，需先删掉默认的 text/plain
            del response.headers["Content-Type"]
            response.headers["Content-Type"] = "application/json"
            return response

        self.logger.debug(f"拒绝未知路径: {path}")
        return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")

    async def _handle_client(self, websocket: ServerConnection) -> None:
        """处理一个已升级的连接

        握手失败时 websockets 直接应答错误，不会进入此处，也就不会产生 Connection。
        """
        reader = await self.hub.accept(websocket)
        try:
            await reader
        except asyncio.CancelledError:
            reader.cancel()
            raise

    def get_stats(self) -> Dict[str, Any]:
        """获取服务器统计信息"""
        return {
            "server": {
                "running": self.running,
                "host": self.host,
                "port": self.port,
                "ws_path": self.config.ws_path,
            },
            "hub": self.hub.get_stats(),
        }


# 便捷的启动函数
async def start_hub_server(
    host: Optional[str] = None,
    port: Optional[int] = None,
    hub: Optional[Hub] = None,
    config: Optional[RoomcastConfig] = None,
) -> HubServer:
    """启动 Hub 服务器

    Args:
        host: 监听地址，默认取配置
        port: 监听端口，默认取配置
        hub: 复用已有的 Hub
        config: 配置，默认使用全局配置

    Returns:
        Hub 服务器实例
    """
    server = HubServer(hub=hub, config=config, host=host, port=port)
    await server.start()
    return server
