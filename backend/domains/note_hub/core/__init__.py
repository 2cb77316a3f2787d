"""
核心层：数据模型、存储、搜索和编辑会话
"""

from .models import FormData, Note, NoteCollection
from .search import SearchIndex, filter_notes
from .session import EditSession, SessionMode, SessionState
from .store import NoteStore, SaveOutcome

__all__ = [
    'Note',
    'NoteCollection',
    'FormData',
    'NoteStore',
    'SaveOutcome',
    'SearchIndex',
    'filter_notes',
    'EditSession',
    'SessionMode',
    'SessionState',
]
