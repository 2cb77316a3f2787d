"""
笔记存储层 - 内存集合 + 持久化网关

持有唯一的笔记集合快照，提供 CRUD 和 ID 分配，
每次变更后把完整集合交给 PersistenceGateway 保存。

变更在内存中同步完成（下一次读取立即可见），
保存作为 asyncio 任务在后台执行，调用方不等待持久化完成。
保存按调度顺序串行执行；轮到某次保存时若已有更新的快照在排队，
该次保存直接跳过，因此持久化值最终收敛到最新快照。
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Set

from domains.core.exceptions import PersistenceError, ValidationError

from .models import Note, NoteCollection

if TYPE_CHECKING:
    from ..persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveOutcome:
    """
    一次保存的结果

    Attributes:
        generation: 快照代数（每次变更 +1）
        ok: 是否写入成功
        skipped: 是否因已有更新的快照排队而跳过
        error: 写入失败时的异常
    """
    generation: int
    ok: bool
    skipped: bool = False
    error: Optional[PersistenceError] = None


SaveListener = Callable[[SaveOutcome], None]


def _validate_title(title: str) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("标题不能为空", field="title")
    return title


class NoteStore:
    """
    笔记存储层

    使用示例:
        store = NoteStore(gateway)
        await store.initialize()
        note_id = store.create("Milk", "buy")
        await store.flush()
    """

    def __init__(self, gateway: "PersistenceGateway"):
        """
        初始化存储层

        Args:
            gateway: 持久化网关
        """
        self.gateway = gateway
        self._notes: NoteCollection = ()
        self._last_id = 0

        self._initialized = False
        self._load_task: Optional[asyncio.Task] = None

        self._generation = 0
        self._saved_generation = 0
        self._save_lock: Optional[asyncio.Lock] = None
        self._pending: Set[asyncio.Task] = set()
        self._listeners: List[SaveListener] = []

        self.last_save: Optional[asyncio.Task] = None
        self.last_save_error: Optional[PersistenceError] = None

    # ==================== 读取 ====================

    @property
    def notes(self) -> NoteCollection:
        """当前集合快照"""
        return self._notes

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def saved_generation(self) -> int:
        """最近一次成功写入的快照代数"""
        return self._saved_generation

    def get(self, note_id: int) -> Optional[Note]:
        """获取单个笔记"""
        return next((n for n in self._notes if n.id == note_id), None)

    def count(self) -> int:
        """统计笔记总数"""
        return len(self._notes)

    # ==================== 加载 ====================

    async def initialize(self) -> bool:
        """
        从持久化网关加载集合（至多加载一次）

        并发调用共享同一次加载。加载结果返回时集合已非空
        （重入调用，或加载期间发生了变更）则丢弃加载结果。

        Returns:
            是否采用了加载结果

        Raises:
            PersistenceError: 后端读取失败（内存集合保持不变）
        """
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._hydrate())
        return await asyncio.shield(self._load_task)

    async def _hydrate(self) -> bool:
        try:
            loaded = await self.gateway.load()
        except PersistenceError as e:
            logger.error(f"notes_load_failed: [{e.code}] {e.message}")
            raise
        finally:
            self._initialized = True

        if self._notes or self._generation:
            logger.info(f"notes_load_discarded: in_memory={len(self._notes)}, loaded={len(loaded)}")
            return False

        self._notes = tuple(loaded)
        self._last_id = max(self._last_id, max((n.id for n in loaded), default=0))
        logger.info(f"note_store_hydrated: count={len(self._notes)}")
        return True

    # ==================== 基本 CRUD ====================

    def create(self, title: str, description: str = "") -> int:
        """
        创建笔记

        Returns:
            新笔记的 ID

        Raises:
            ValidationError: 标题为空
            RuntimeError: 不在运行中的事件循环内调用（集合不变）
        """
        _validate_title(title)
        note_id = self._next_id()
        note = Note(id=note_id, title=title, description=description or "")
        self._commit(self._notes + (note,))
        logger.info(f"note_created: id={note_id}, total={len(self._notes)}")
        return note_id

    def update(self, note_id: int, title: str, description: str = "") -> bool:
        """
        更新笔记标题和描述，保持 ID 和位置不变

        Returns:
            笔记是否存在（不存在时不触发保存）

        Raises:
            ValidationError: 标题为空
        """
        _validate_title(title)
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                updated = note.with_content(title, description or "")
                self._commit(self._notes[:index] + (updated,) + self._notes[index + 1:])
                logger.info(f"note_updated: id={note_id}")
                return True

        logger.debug(f"note_update_not_found: id={note_id}")
        return False

    def delete(self, note_id: int) -> bool:
        """
        删除笔记

        Returns:
            笔记是否存在（不存在时不触发保存）
        """
        remaining = tuple(n for n in self._notes if n.id != note_id)
        if len(remaining) == len(self._notes):
            logger.debug(f"note_delete_not_found: id={note_id}")
            return False

        self._commit(remaining)
        logger.info(f"note_deleted: id={note_id}, total={len(self._notes)}")
        return True

    def _next_id(self) -> int:
        # 单调递增，删除后不复用；计数在 _commit 中推进
        return max(self._last_id, max((n.id for n in self._notes), default=0)) + 1

    def _commit(self, notes: NoteCollection) -> None:
        # 没有运行中的事件循环时在修改任何状态之前抛出 RuntimeError
        loop = asyncio.get_running_loop()
        self._notes = notes
        self._last_id = max(self._last_id, max((n.id for n in notes), default=0))
        self._generation += 1
        self._schedule_save(loop, self._generation, notes)

    # ==================== 持久化 ====================

    def add_save_listener(self, listener: SaveListener) -> None:
        """注册保存完成回调"""
        self._listeners.append(listener)

    def remove_save_listener(self, listener: SaveListener) -> None:
        """移除保存完成回调"""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _schedule_save(self, loop: asyncio.AbstractEventLoop, generation: int, snapshot: NoteCollection) -> None:
        """调度后台保存（不阻塞调用方）"""
        if self._save_lock is None:
            self._save_lock = asyncio.Lock()

        task = loop.create_task(self._persist(generation, snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self.last_save = task

    async def _persist(self, generation: int, snapshot: NoteCollection) -> SaveOutcome:
        async with self._save_lock:
            if generation < self._generation:
                outcome = SaveOutcome(generation=generation, ok=True, skipped=True)
                logger.debug(f"notes_save_skipped: generation={generation}")
            else:
                try:
                    await self.gateway.save(snapshot)
                except PersistenceError as e:
                    self.last_save_error = e
                    outcome = SaveOutcome(generation=generation, ok=False, error=e)
                    logger.error(f"notes_save_failed: generation={generation}, [{e.code}] {e.message}")
                else:
                    self._saved_generation = generation
                    self.last_save_error = None
                    outcome = SaveOutcome(generation=generation, ok=True)

        self._notify(outcome)
        return outcome

    def _notify(self, outcome: SaveOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as e:
                logger.warning(f"save_listener_failed: {type(e).__name__}: {e}")

    async def flush(self) -> List[SaveOutcome]:
        """等待所有进行中的保存完成"""
        outcomes: List[SaveOutcome] = []
        awaited: Set[asyncio.Task] = set()
        while True:
            tasks = [t for t in self._pending if t not in awaited]
            if not tasks:
                return outcomes
            awaited.update(tasks)
            outcomes.extend(await asyncio.gather(*tasks))
