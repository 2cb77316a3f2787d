"""
编辑会话

同一时刻至多一个会话，状态：
- idle: 没有打开表单
- creating: 新建笔记表单（空白字段）
- editing(note_id): 编辑已有笔记，表单预填打开时的笔记内容

提交时 creating 映射为 NoteStore.create，editing 映射为 NoteStore.update。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domains.core.exceptions import NoteNotFoundError, SessionStateError

from .models import FormData
from .store import NoteStore

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    """会话状态"""
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"


@dataclass(frozen=True)
class SessionState:
    """会话状态值（editing 时携带目标笔记 ID）"""
    mode: SessionMode = SessionMode.IDLE
    note_id: Optional[int] = None

    @classmethod
    def idle(cls) -> 'SessionState':
        return cls()

    @classmethod
    def creating(cls) -> 'SessionState':
        return cls(mode=SessionMode.CREATING)

    @classmethod
    def editing(cls, note_id: int) -> 'SessionState':
        return cls(mode=SessionMode.EDITING, note_id=note_id)

    def __str__(self) -> str:
        if self.mode == SessionMode.EDITING:
            return f"editing({self.note_id})"
        return self.mode.value


class EditSession:
    """
    编辑会话状态机

    使用示例:
        session = EditSession(store)
        session.open_create()
        note_id = session.submit(FormData("Eggs", "dozen"))
        session.open_edit(note_id)
        session.open_edit(note_id)   # 再次选择同一笔记 -> 关闭表单
    """

    def __init__(self, store: NoteStore):
        self.store = store
        self._state = SessionState.idle()
        self._form: Optional[FormData] = None
        self.last_submitted_id: Optional[int] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def form(self) -> Optional[FormData]:
        """当前表单数据；idle 时为 None"""
        return self._form

    @property
    def is_open(self) -> bool:
        return self._state.mode != SessionMode.IDLE

    def _reset(self) -> None:
        self._state = SessionState.idle()
        self._form = None

    # ==================== 状态转换 ====================

    def open_create(self) -> None:
        """
        打开新建表单

        Raises:
            SessionStateError: 已有打开的会话
        """
        if self.is_open:
            raise SessionStateError("open_create", str(self._state))
        self._state = SessionState.creating()
        self._form = FormData.blank()

    def open_edit(self, note_id: int) -> SessionState:
        """
        打开编辑表单；对正在编辑的同一笔记再次调用则关闭表单

        Returns:
            转换后的状态

        Raises:
            SessionStateError: 正在新建笔记
            NoteNotFoundError: 笔记不存在
        """
        if self._state == SessionState.editing(note_id):
            self._reset()
            return self._state

        if self._state.mode == SessionMode.CREATING:
            raise SessionStateError("open_edit", str(self._state))

        note = self.store.get(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)

        self._state = SessionState.editing(note_id)
        self._form = FormData.from_note(note)
        return self._state

    def update_form(self, title: Optional[str] = None, description: Optional[str] = None) -> FormData:
        """
        修改表单草稿

        Raises:
            SessionStateError: 没有打开的会话
        """
        if not self.is_open or self._form is None:
            raise SessionStateError("update_form", str(self._state))
        self._form = FormData(
            title=self._form.title if title is None else title,
            description=self._form.description if description is None else description,
        )
        return self._form

    def submit(self, form: Optional[FormData] = None) -> Optional[int]:
        """
        提交表单

        Args:
            form: 表单数据，None 则使用当前草稿

        Returns:
            新建或更新的笔记 ID；更新目标已不存在时为 None

        Raises:
            SessionStateError: 没有打开的会话
            ValidationError: 标题为空（会话保持打开）
        """
        if not self.is_open:
            raise SessionStateError("submit", str(self._state))

        data = form if form is not None else self._form
        if data is None:
            data = FormData.blank()

        if self._state.mode == SessionMode.CREATING:
            note_id: Optional[int] = self.store.create(data.title, data.description)
        else:
            target = self._state.note_id
            found = self.store.update(target, data.title, data.description)
            if not found:
                logger.info(f"edit_session_target_missing: id={target}")
            note_id = target if found else None

        self.last_submitted_id = note_id
        self._reset()
        return note_id

    def cancel(self) -> None:
        """关闭表单并丢弃草稿（不影响已触发的保存）"""
        self._reset()

    def close_if_editing(self, note_id: int) -> bool:
        """目标笔记被删除时关闭编辑会话"""
        if self._state == SessionState.editing(note_id):
            self._reset()
            return True
        return False
