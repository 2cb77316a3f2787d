"""
内存键值后端

用于测试和 NOTEPAD_STORAGE_BACKEND=memory。
支持注入延迟与故障，便于模拟乱序完成和写入失败。
"""

import asyncio
from typing import Dict, Optional

from .base import KeyValueBackend


class MemoryBackend(KeyValueBackend):
    """
    基于 dict 的键值后端

    Attributes:
        delay: 每次 get/set 前的等待秒数
        fail_reads: 为 True 时 get 抛出 ConnectionError
        fail_writes: 为 True 时 set 抛出 ConnectionError
        reads: 读取次数
        writes: 成功写入的次数
    """

    name = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None, delay: float = 0.0):
        self._data: Dict[str, str] = dict(initial or {})
        self.delay = delay
        self.fail_reads = False
        self.fail_writes = False
        self.reads = 0
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        self.reads += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_reads:
            raise ConnectionError("memory backend read failure")
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_writes:
            raise ConnectionError("memory backend write failure")
        self._data[key] = value
        self.writes += 1

    def peek(self, key: str) -> Optional[str]:
        """同步读取当前值（不经过延迟和故障注入）"""
        return self._data.get(key)
