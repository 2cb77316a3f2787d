"""
键值存储后端基类

持久化后端只需提供异步的 get/set 接口，
PersistenceGateway 在其上实现笔记集合的加载与保存。
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """
    异步键值存储后端

    子类需要实现:
    - get: 读取键对应的文本值，键不存在返回 None
    - set: 覆盖写入键的文本值

    后端自身出错时直接抛出原始异常，由 PersistenceGateway 统一转换。
    """

    name: str = "base"

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """读取键值"""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """写入键值（覆盖）"""

    async def close(self) -> None:
        """释放后端资源"""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
