"""Dependency injection for FastAPI routes.

NoteService 实例挂在 app.state 上，测试时可直接替换。
"""

from typing import Annotated

from fastapi import Depends, Path, Request

from domains.core import NoteNotFoundError
from domains.note_hub.core.models import Note
from domains.note_hub.services.note_service import NoteService
from domains.note_hub.services.note_service import get_note_service as get_default_note_service


def get_note_service(request: Request) -> NoteService:
    """Get the NoteService bound to this application."""
    service = getattr(request.app.state, "note_service", None)
    if service is None:
        service = get_default_note_service()
        request.app.state.note_service = service
    return service


async def get_note_or_404(
    note_id: Annotated[int, Path(description="笔记ID")],
    service: NoteService = Depends(get_note_service),
) -> Note:
    """
    验证笔记存在并返回笔记对象。

    用作路由依赖注入，不存在时抛出 NoteNotFoundError（404）。
    """
    note = service.get_note(note_id)
    if note is None:
        raise NoteNotFoundError(note_id)
    return note
