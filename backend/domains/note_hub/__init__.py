"""
笔记领域模块

一个由外部键值存储支撑的轻量笔记客户端核心：
- 持久化网关：把异步键值 get/set 封装为集合的 load/save
- 存储层：唯一的内存集合，负责 CRUD、ID 分配和保存调度
- 搜索视图：按关键词过滤当前集合
- 编辑会话：仲裁"新建"与"编辑已有笔记"
"""

from .core.models import FormData, Note
from .core.search import SearchIndex, filter_notes
from .core.session import EditSession, SessionMode, SessionState
from .core.store import NoteStore, SaveOutcome
from .persistence import PersistenceGateway, create_gateway
from .services.note_service import NoteService, get_note_service, reset_note_service

__all__ = [
    'Note',
    'FormData',
    'NoteStore',
    'SaveOutcome',
    'SearchIndex',
    'filter_notes',
    'EditSession',
    'SessionMode',
    'SessionState',
    'PersistenceGateway',
    'create_gateway',
    'NoteService',
    'get_note_service',
    'reset_note_service',
]
