"""
服务层：笔记业务逻辑封装
"""

from .note_service import NoteService, get_note_service, reset_note_service

__all__ = ['NoteService', 'get_note_service', 'reset_note_service']
