"""Note API routes.

Mutations take effect in memory immediately; persistence happens in the
background and responses do not wait for it. A failed save shows up as
``last_save_error`` in ``GET /notes/stats``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.common import ApiResponse
from app.schemas.note import Note, NoteForm, NoteList, NoteStats, QueryUpdate
from app.core.deps import get_note_or_404, get_note_service
from domains.core import NoteNotFoundError
from domains.note_hub.services.note_service import NoteService

router = APIRouter()


def _note_list(service: NoteService, notes, query: str) -> NoteList:
    return NoteList(
        items=[Note.model_validate(n) for n in notes],
        total=service.store.count(),
        query=query,
    )


@router.get("/", response_model=ApiResponse[NoteList])
async def list_notes(
    search: Optional[str] = Query(None, description="只对本次请求生效的关键词；缺省时使用当前关键词"),
    service: NoteService = Depends(get_note_service),
):
    """笔记列表（集合顺序）"""
    if search is not None:
        return ApiResponse(data=_note_list(service, service.search_notes(search), search))
    return ApiResponse(data=_note_list(service, service.visible_notes(), service.query))


@router.put("/query", response_model=ApiResponse[NoteList])
async def set_query(request: QueryUpdate, service: NoteService = Depends(get_note_service)):
    """设置当前关键词（影响 GET /notes 与 /notes/stats），返回可见笔记"""
    notes = service.set_query(request.query)
    return ApiResponse(data=_note_list(service, notes, service.query))


@router.get("/stats", response_model=ApiResponse[NoteStats])
async def get_stats(service: NoteService = Depends(get_note_service)):
    return ApiResponse(data=NoteStats(**service.get_stats()))


@router.get("/{note_id}", response_model=ApiResponse[Note])
async def get_note(note=Depends(get_note_or_404)):
    return ApiResponse(data=Note.model_validate(note))


@router.post("/", response_model=ApiResponse[Note])
async def create_note(form: NoteForm, service: NoteService = Depends(get_note_service)):
    """新建笔记，返回分配了 ID 的笔记"""
    note_id = service.create_note(form.title, form.description)
    return ApiResponse(data=Note.model_validate(service.get_note(note_id)), message="创建成功")


@router.put("/{note_id}", response_model=ApiResponse[Note])
async def update_note(
    note_id: int,
    form: NoteForm,
    service: NoteService = Depends(get_note_service),
):
    """替换标题和描述；ID 与位置不变"""
    if not service.update_note(note_id, form.title, form.description):
        raise NoteNotFoundError(note_id)
    return ApiResponse(data=Note.model_validate(service.get_note(note_id)), message="更新成功")


@router.delete("/{note_id}", response_model=ApiResponse[None])
async def delete_note(note_id: int, service: NoteService = Depends(get_note_service)):
    """删除笔记；正在编辑该笔记的会话随之关闭"""
    if not service.delete_note(note_id):
        raise NoteNotFoundError(note_id)
    return ApiResponse(message="删除成功")
