"""Roomcast 协议核心模块"""

from .types import Notification, Payload, encode_payload

__all__ = [
    "Notification",
    "Payload",
    "encode_payload",
]
