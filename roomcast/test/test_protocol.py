#!/usr/bin/env python3
"""测试通知类型与负载编码"""

import pytest

from roomcast.exceptions import PayloadError
from roomcast.protocol import Notification, encode_payload


def test_wire_tokens():
    assert Notification.ROOM_CREATED.value == "new-room"
    assert Notification.CHAT_POSTED.value == "new-chat"


@pytest.mark.parametrize(
    "payload, frame",
    [
        (Notification.ROOM_CREATED, "new-room"),
        ("new-chat", "new-chat"),
        (b"new-room", "new-room"),
        (bytearray(b"custom"), "custom"),
    ],
)
def test_encode_payload(payload, frame):
    assert encode_payload(payload) == frame


def test_encode_rejects_invalid_utf8():
    with pytest.raises(PayloadError) as exc_info:
        encode_payload(b"\xff")
    assert exc_info.value.error_code == "PROTO001"


def test_encode_rejects_other_types():
    with pytest.raises(PayloadError):
        encode_payload({"type": "new-room"})


def test_from_wire():
    assert Notification.from_wire("new-chat") is Notification.CHAT_POSTED
    assert Notification.from_wire(b"new-room") is Notification.ROOM_CREATED


def test_from_wire_unknown_token():
    with pytest.raises(PayloadError) as exc_info:
        Notification.from_wire("new-user")
    assert exc_info.value.details == {"frame": "new-user"}
