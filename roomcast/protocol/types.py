"""Roomcast 类型定义

本模块定义推送给客户端的通知类型。线路上只有两个文本令牌，
枚举值即为原样发送的 WebSocket 文本帧。
"""

from enum import Enum
from typing import Union

from ..exceptions import PayloadError


class Notification(Enum):
    """通知类型枚举

    客户端收到后自行刷新对应的视图，帧中不携带其他数据。
    """

    ROOM_CREATED = "new-room"
    CHAT_POSTED = "new-chat"

    @classmethod
    def from_wire(cls, text: Union[str, bytes]) -> "Notification":
        """解析收到的文本帧

        Raises:
            PayloadError: 未知令牌
        """
        if isinstance(text, bytes):
            text = _decode(text)
        try:
            return cls(text)
        except ValueError:
            raise PayloadError(
                f"Unknown notification: {text!r}", {"frame": text}
            ) from None


Payload = Union[Notification, str, bytes]


def encode_payload(payload: Payload) -> str:
    """把广播负载转换为文本帧

    Args:
        payload: Notification、字符串或 UTF-8 字节串

    Returns:
        要发送的文本帧

    Raises:
        PayloadError: 类型不支持或字节串不是合法 UTF-8
    """
    if isinstance(payload, Notification):
        return payload.value
    if isinstance(payload, str):
        return payload
    if isinstance(payload, (bytes, bytearray)):
        return _decode(bytes(payload))
    raise PayloadError(
        f"Unsupported payload type: {type(payload).__name__}",
        {"type": type(payload).__name__},
    )


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadError(f"Payload is not valid UTF-8: {e}") from e
