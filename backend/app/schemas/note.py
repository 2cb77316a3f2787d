"""Note-related Pydantic schemas."""

from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from domains.note_hub.core.session import SessionMode


class NoteForm(BaseModel):
    """Note form payload (create / update / session submit)."""

    title: str = Field(..., description="笔记标题", min_length=1)
    description: str = Field("", description="笔记描述，可以为空")


class Note(BaseModel):
    """Complete note model for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="笔记 ID")
    title: str = Field(..., description="笔记标题")
    description: str = Field("", description="笔记描述")


class NoteList(BaseModel):
    """Filtered note list."""

    items: List[Note] = Field(default_factory=list)
    total: int = Field(0, description="集合中的笔记总数")
    query: str = Field("", description="当前搜索关键词")


class QueryUpdate(BaseModel):
    """Replace the service-wide search keyword."""

    query: str = Field("", description="搜索关键词；空字符串显示全部笔记")


class NoteStats(BaseModel):
    """Note store statistics."""

    total: int = Field(..., description="笔记总数")
    visible: int = Field(..., description="当前关键词下可见的笔记数")
    query: str = Field("", description="当前搜索关键词")
    session: str = Field("idle", description="编辑会话状态")
    initialized: bool = Field(False, description="是否已完成加载")
    last_save_error: Optional[str] = Field(None, description="最近一次保存失败信息")


class FormUpdate(BaseModel):
    """Partial edit of the session draft."""

    title: Optional[str] = None
    description: Optional[str] = None


class SessionView(BaseModel):
    """Edit session state plus the form it shows."""

    mode: SessionMode = SessionMode.IDLE
    note_id: Optional[int] = Field(None, description="正在编辑的笔记 ID")
    form: Optional[FormUpdate] = Field(None, description="表单数据；idle 时为空")
    last_submitted_id: Optional[int] = Field(None, description="最近一次提交的笔记 ID")
