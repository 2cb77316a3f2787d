"""
笔记服务层

展示层唯一的入口，把用户意图转换为核心层操作：
- 搜索关键词变化 -> SearchIndex 重新过滤
- 打开新建/编辑、提交、取消 -> EditSession
- 删除 -> NoteStore，并关闭正在编辑该笔记的会话
"""

import logging
from typing import Any, List, Optional

from domains.core.settings import NotepadSettings, get_settings

from ..core.models import FormData, Note
from ..core.search import SearchIndex, filter_notes
from ..core.session import EditSession, SessionState
from ..core.store import NoteStore
from ..persistence import PersistenceGateway, create_gateway

logger = logging.getLogger(__name__)


class NoteService:
    """
    笔记服务层

    封装笔记相关的业务逻辑，组合存储层、搜索视图和编辑会话。
    """

    def __init__(
        self,
        store: NoteStore | None = None,
        gateway: PersistenceGateway | None = None,
    ):
        """
        初始化服务

        Args:
            store: 笔记存储层实例
            gateway: 持久化网关（未提供 store 时用于创建存储层）
        """
        if store is None:
            store = NoteStore(gateway or create_gateway())
        self.store = store
        self.search = SearchIndex()
        self.session = EditSession(store)

    async def initialize(self) -> bool:
        """加载持久化的笔记集合"""
        return await self.store.initialize()

    async def flush(self) -> None:
        """等待进行中的保存完成"""
        await self.store.flush()

    async def close(self) -> None:
        """等待保存完成并关闭持久化后端"""
        await self.store.flush()
        await self.store.gateway.close()

    # ==================== CRUD ====================

    def get_note(self, note_id: int) -> Note | None:
        """获取笔记详情"""
        return self.store.get(note_id)

    def list_notes(self) -> List[Note]:
        """全部笔记（集合顺序）"""
        return list(self.store.notes)

    def create_note(self, title: str, description: str = "") -> int:
        """创建笔记，返回新 ID"""
        return self.store.create(title, description)

    def update_note(self, note_id: int, title: str, description: str = "") -> bool:
        """更新笔记，返回笔记是否存在"""
        return self.store.update(note_id, title, description)

    def delete_note(self, note_id: int) -> bool:
        """删除笔记；若正在编辑该笔记则关闭会话"""
        deleted = self.store.delete(note_id)
        if deleted and self.session.close_if_editing(note_id):
            logger.info(f"edit_session_closed_by_delete: id={note_id}")
        return deleted

    # ==================== 搜索 ====================

    @property
    def query(self) -> str:
        return self.search.query

    def set_query(self, query: Optional[str]) -> List[Note]:
        """更新搜索关键词并返回可见笔记"""
        self.search.set_query(query)
        return self.visible_notes()

    def visible_notes(self) -> List[Note]:
        """当前关键词下的可见笔记"""
        return self.search.results(self.store.notes)

    def search_notes(self, query: Optional[str]) -> List[Note]:
        """按给定关键词过滤，不改变当前关键词"""
        return filter_notes(self.store.notes, query)

    # ==================== 编辑会话 ====================

    @property
    def session_state(self) -> SessionState:
        return self.session.state

    def open_create(self) -> None:
        self.session.open_create()

    def open_edit(self, note_id: int) -> SessionState:
        return self.session.open_edit(note_id)

    def update_form(self, title: Optional[str] = None, description: Optional[str] = None) -> FormData:
        return self.session.update_form(title=title, description=description)

    def submit(self, form: Optional[FormData] = None) -> Optional[int]:
        note_id = self.session.submit(form)
        logger.info(f"edit_session_submitted: id={note_id}")
        return note_id

    def cancel(self) -> None:
        self.session.cancel()

    # ==================== 统计 ====================

    def get_stats(self) -> dict[str, Any]:
        """获取统计信息"""
        error = self.store.last_save_error
        return {
            "total": self.store.count(),
            "visible": len(self.visible_notes()),
            "query": self.query,
            "session": str(self.session.state),
            "initialized": self.store.is_initialized,
            "last_save_error": error.message if error else None,
        }


# ==================== 单例管理 ====================

_note_service: Optional[NoteService] = None


def get_note_service(settings: Optional[NotepadSettings] = None) -> NoteService:
    """获取笔记服务单例"""
    global _note_service
    if _note_service is None:
        _note_service = NoteService(gateway=create_gateway(settings or get_settings()))
    return _note_service


def reset_note_service() -> None:
    """重置服务单例（用于测试）"""
    global _note_service
    _note_service = None
