#!/usr/bin/env python3
"""
Roomcast 命令行入口

- serve: 启动 Hub 服务器，直到收到 SIGINT/SIGTERM
- listen: 连接到 Hub 并打印收到的通知
"""

import argparse
import asyncio
import signal
import sys
from typing import List, Optional

from rich.console import Console

from .client import NotificationListener
from .exceptions import RoomcastError
from .hub import HubServer
from .store import ChatRoomService
from .utils import RoomcastConfig, configure_logging, get_logger

STATS_INTERVAL = 30.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomcast", description="Room/chat change notification hub"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the hub server")
    serve_parser.add_argument("--host", help="Host address")
    serve_parser.add_argument("--port", type=int, help="Port number")
    serve_parser.add_argument("--path", help="WebSocket upgrade path")
    serve_parser.add_argument("--log-level", help="Log level")
    serve_parser.add_argument(
        "--seed", action="store_true", default=None, help="Load sample rooms and chats"
    )

    listen_parser = subparsers.add_parser("listen", help="Print hub notifications")
    listen_parser.add_argument("url", help="Hub URL, e.g. ws://localhost:8080/ws")

    return parser


def config_from_args(args: argparse.Namespace) -> RoomcastConfig:
    """环境变量为底，命令行参数覆盖"""
    config = RoomcastConfig.from_env()
    overrides = {
        "host": args.host,
        "port": args.port,
        "ws_path": args.path,
        "log_level": args.log_level.upper() if args.log_level else None,
        "seed_sample_data": args.seed,
    }
    config.update(**{key: value for key, value in overrides.items() if value is not None})
    config.validate()
    return config


async def serve(config: RoomcastConfig) -> None:
    """运行服务器直到收到停止信号"""
    logger = get_logger("roomcast.cli")
    server = HubServer(config=config)
    service = ChatRoomService(server.hub)
    if config.seed_sample_data:
        service.seed_sample_data()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows 不支持，依赖 KeyboardInterrupt
            logger.warning(f"当前平台不支持信号处理 ({sig})，请使用 Ctrl+C 退出")

    await server.start()
    stats_task = asyncio.create_task(_report_stats(server))
    try:
        await stop_event.wait()
        logger.info("收到停止信号，正在关闭服务器...")
    finally:
        stats_task.cancel()
        await server.stop()


async def _report_stats(server: HubServer) -> None:
    logger = get_logger("roomcast.cli")
    while True:
        await asyncio.sleep(STATS_INTERVAL)
        stats = server.hub.get_stats()
        logger.info(
            " | ".join(f"{key}: {value}" for key, value in stats.items())
        )


async def listen(url: str, console: Optional[Console] = None) -> None:
    """打印收到的通知直到连接关闭"""
    console = console or Console()
    async with NotificationListener(url) as listener:
        console.print(f"[green]Listening on {url}[/green]")
        async for notification in listener:
            console.print(f"[bold]{notification.value}[/bold] ({notification.name})")
    console.print("[yellow]Connection closed[/yellow]")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.command == "serve":
            config = config_from_args(args)
            configure_logging(config)
            asyncio.run(serve(config))
        else:
            configure_logging()
            asyncio.run(listen(args.url))
    except KeyboardInterrupt:
        pass
    except (RoomcastError, OSError) as e:
        Console(stderr=True).print(f"[red]roomcast: {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
