"""Edit session API routes.

对应展示层的"新建 / 编辑 / 提交 / 取消"意图。
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from app.schemas.common import ApiResponse
from app.schemas.note import FormUpdate, NoteForm, SessionView
from app.core.deps import get_note_service
from domains.note_hub.core.models import FormData
from domains.note_hub.services.note_service import NoteService

router = APIRouter()


def _session_view(service: NoteService) -> SessionView:
    session = service.session
    form = session.form
    return SessionView(
        mode=session.state.mode,
        note_id=session.state.note_id,
        form=FormUpdate(title=form.title, description=form.description) if form else None,
        last_submitted_id=session.last_submitted_id,
    )


@router.get("/", response_model=ApiResponse[SessionView])
async def get_session(service: NoteService = Depends(get_note_service)):
    """获取当前编辑会话"""
    return ApiResponse(data=_session_view(service))


@router.post("/create", response_model=ApiResponse[SessionView])
async def open_create(service: NoteService = Depends(get_note_service)):
    """打开新建表单"""
    service.open_create()
    return ApiResponse(data=_session_view(service))


@router.post("/edit/{note_id}", response_model=ApiResponse[SessionView])
async def open_edit(note_id: int, service: NoteService = Depends(get_note_service)):
    """打开编辑表单；对正在编辑的笔记再次调用则关闭"""
    service.open_edit(note_id)
    return ApiResponse(data=_session_view(service))


@router.patch("/form", response_model=ApiResponse[SessionView])
async def update_form(request: FormUpdate, service: NoteService = Depends(get_note_service)):
    """修改表单草稿"""
    service.update_form(title=request.title, description=request.description)
    return ApiResponse(data=_session_view(service))


@router.post("/submit", response_model=ApiResponse[SessionView])
async def submit(
    request: Optional[NoteForm] = Body(None),
    service: NoteService = Depends(get_note_service),
):
    """提交表单；不带请求体时提交当前草稿"""
    form = FormData(title=request.title, description=request.description) if request else None
    service.submit(form)
    return ApiResponse(data=_session_view(service), message="提交成功")


@router.post("/cancel", response_model=ApiResponse[SessionView])
async def cancel(service: NoteService = Depends(get_note_service)):
    """关闭表单并丢弃草稿"""
    service.cancel()
    return ApiResponse(data=_session_view(service))
