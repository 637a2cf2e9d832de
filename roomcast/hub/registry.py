"""Hub 连接注册表"""

from typing import Callable, Iterator, List, Set

from .connection import Connection


class ConnectionRegistry:
    """当前活跃连接的集合

    不做任何同步：只允许 Hub 协调任务读写。
    """

    def __init__(self):
        self._connections: Set[Connection] = set()

    def add(self, connection: Connection) -> bool:
        """加入连接

        Returns:
            是否为新加入（重复加入返回 False，集合不变）
        """
        if connection in self._connections:
            return False
        self._connections.add(connection)
        return True

    def remove(self, connection: Connection) -> bool:
        """移除连接，不存在时什么也不做

        Returns:
            是否确实移除了
        """
        if connection not in self._connections:
            return False
        self._connections.discard(connection)
        return True

    def for_each(self, func: Callable[[Connection], None]) -> None:
        """对快照中的每个连接调用 func，回调内修改注册表不影响本次遍历"""
        for connection in list(self._connections):
            func(connection)

    def clear(self) -> List[Connection]:
        """清空注册表

        Returns:
            被移除的连接
        """
        removed = list(self._connections)
        self._connections.clear()
        return removed

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return connection in self._connections

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections))
