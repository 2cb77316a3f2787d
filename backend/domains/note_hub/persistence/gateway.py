"""
持久化网关

把外部键值存储的异步 get/set 封装为笔记集合的 load/save：
- 整个集合序列化为一个 JSON 文本（{id, title, description} 记录列表）
- 键不存在或解码失败时加载为空集合
- 后端出错统一转换为 PersistenceError，不做重试
"""

import json
import logging
from typing import Any, Iterable, List

from domains.core.exceptions import PersistenceError

from ..core.models import Note, NoteCollection
from .base import KeyValueBackend

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "notes"


def encode_notes(notes: Iterable[Note]) -> str:
    """将笔记集合编码为 JSON 文本"""
    return json.dumps([note.to_dict() for note in notes], ensure_ascii=False)


def _parse_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        raise ValueError(f"notes blob is not valid JSON: {type(e).__name__}: {e}") from e


def decode_notes(raw: str) -> NoteCollection:
    """
    从 JSON 文本解码笔记集合

    Raises:
        ValueError: 文本不是合法的笔记记录列表
    """
    records = _parse_json(raw)

    # 兼容被重复序列化的旧值（JSON 字符串中再包一层 JSON），只解开一层
    if isinstance(records, str):
        records = _parse_json(records)

    if not isinstance(records, list):
        raise ValueError(f"notes blob must be a list, got {type(records).__name__}")

    return tuple(Note.from_dict(record) for record in records)


def repair_duplicate_ids(notes: NoteCollection) -> NoteCollection:
    """
    修复重复 ID

    旧版客户端用"集合长度 + 1"分配 ID，删除后再创建会写入重复 ID。
    保留首次出现的 ID，后续重复项重新分配大于当前最大值的 ID，保持顺序不变。
    """
    seen: set[int] = set()
    next_id = max((note.id for note in notes), default=0)
    repaired: List[Note] = []
    reassigned: List[Any] = []

    for note in notes:
        if note.id in seen:
            next_id += 1
            reassigned.append((note.id, next_id))
            note = Note(id=next_id, title=note.title, description=note.description)
        seen.add(note.id)
        repaired.append(note)

    if reassigned:
        logger.warning(f"duplicate_note_ids_repaired: {reassigned}")
        return tuple(repaired)
    return notes


class PersistenceGateway:
    """
    笔记集合持久化网关

    不做缓存：save 进行中时立即 load 不保证读到最新值。
    """

    def __init__(self, backend: KeyValueBackend, key: str = DEFAULT_STORAGE_KEY):
        """
        初始化网关

        Args:
            backend: 键值存储后端
            key: 存放笔记集合的键名
        """
        self.backend = backend
        self.key = key

    async def load(self) -> NoteCollection:
        """
        加载已保存的笔记集合

        Returns:
            笔记集合；无历史数据或数据无法解码时返回空集合

        Raises:
            PersistenceError: 后端读取失败
        """
        try:
            raw = await self.backend.get(self.key)
        except Exception as e:
            raise PersistenceError(
                "load",
                f"{type(e).__name__}: {e}",
                details={"operation": "load", "key": self.key, "backend": self.backend.name},
                cause=e,
            ) from e

        if raw is None or raw == "":
            logger.info(f"notes_not_found: key={self.key}")
            return ()

        try:
            notes = decode_notes(raw)
        except ValueError as e:
            logger.warning(f"notes_decode_failed: key={self.key}, {e}")
            return ()

        notes = repair_duplicate_ids(notes)
        logger.info(f"notes_loaded: key={self.key}, count={len(notes)}")
        return notes

    async def save(self, notes: NoteCollection) -> None:
        """
        保存完整笔记集合（覆盖旧值）

        Raises:
            PersistenceError: 后端写入失败
        """
        payload = encode_notes(notes)
        try:
            await self.backend.set(self.key, payload)
        except Exception as e:
            raise PersistenceError(
                "save",
                f"{type(e).__name__}: {e}",
                details={"operation": "save", "key": self.key, "backend": self.backend.name},
                cause=e,
            ) from e
        logger.debug(f"notes_saved: key={self.key}, count={len(notes)}")

    async def close(self) -> None:
        """关闭底层后端"""
        await self.backend.close()
