"""
持久化层：键值后端与持久化网关

后端:
- memory: 进程内 dict（测试用）
- file: 本地 JSON 文件
- redis: Redis 键值存储
"""

from typing import Optional

from domains.core.exceptions import ConfigurationError
from domains.core.settings import NotepadSettings, get_settings

from .base import KeyValueBackend
from .file_backend import JsonFileBackend
from .gateway import (
    DEFAULT_STORAGE_KEY,
    PersistenceGateway,
    decode_notes,
    encode_notes,
    repair_duplicate_ids,
)
from .memory import MemoryBackend


def create_backend(settings: Optional[NotepadSettings] = None) -> KeyValueBackend:
    """按配置创建键值后端"""
    settings = settings or get_settings()
    backend = settings.storage_backend

    if backend == "memory":
        return MemoryBackend()
    if backend == "file":
        return JsonFileBackend(settings.storage_path)
    if backend == "redis":
        from .redis_backend import RedisBackend
        return RedisBackend(settings.redis_url)

    raise ConfigurationError("storage_backend", f"未知的存储后端: {backend}")


def create_gateway(settings: Optional[NotepadSettings] = None) -> PersistenceGateway:
    """按配置创建持久化网关"""
    settings = settings or get_settings()
    return PersistenceGateway(create_backend(settings), key=settings.storage_key)


__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "PersistenceGateway",
    "DEFAULT_STORAGE_KEY",
    "encode_notes",
    "decode_notes",
    "repair_duplicate_ids",
    "create_backend",
    "create_gateway",
]
