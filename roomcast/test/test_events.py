#!/usr/bin/env python3
"""测试事件邮箱"""

import asyncio
from unittest.mock import Mock

from roomcast.hub import Broadcast, Connection, Mailbox, Register


async def test_full_mailbox_warns_once_per_cycle():
    mailbox = Mailbox(maxsize=1)
    mailbox.logger = Mock()

    await mailbox.put(Broadcast("first"))
    producers = [asyncio.create_task(mailbox.put(Broadcast(str(i)))) for i in range(3)]
    await asyncio.sleep(0)
    assert mailbox.logger.warning.call_count == 1

    received = [(await mailbox.get()).payload for _ in range(4)]
    await asyncio.gather(*producers)
    assert received == ["first", "0", "1", "2"]
    assert mailbox.logger.warning.call_count == 1

    # 清空后再次填满会重新告警
    await mailbox.put(Broadcast("again"))
    blocked = asyncio.create_task(mailbox.put(Broadcast("later")))
    await asyncio.sleep(0)
    assert mailbox.logger.warning.call_count == 2

    await mailbox.get()
    await blocked


async def test_drain_nowait_releases_join(make_ws):
    mailbox = Mailbox(maxsize=4)
    conn = Connection(make_ws())
    await mailbox.put(Register(conn))
    await mailbox.put(Broadcast("new-room"))

    events = mailbox.drain_nowait()

    assert events == [Register(conn), Broadcast("new-room")]
    assert mailbox.qsize() == 0
    await asyncio.wait_for(mailbox.join(), 1.0)
