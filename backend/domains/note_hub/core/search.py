"""
笔记搜索

按关键词过滤笔记集合：标题或描述包含关键词（不区分大小写），
保持原集合顺序。只有空字符串返回完整集合，
空白关键词按字面匹配。
"""

from typing import List, Optional, Sequence, Tuple

from .models import Note, NoteCollection


def filter_notes(notes: Sequence[Note], query: Optional[str]) -> List[Note]:
    """
    过滤笔记（纯函数，不修改输入）

    Args:
        notes: 笔记集合快照
        query: 搜索关键词

    Returns:
        匹配的笔记列表
    """
    if not query:
        return list(notes)
    needle = query.lower()
    return [note for note in notes if note.matches(needle)]


class SearchIndex:
    """
    搜索视图

    记录当前关键词，并缓存上一次的过滤结果；
    集合快照或关键词变化时才重新计算。
    """

    def __init__(self, query: str = ""):
        self._query = query
        self._cache_key: Optional[Tuple[NoteCollection, str]] = None
        self._cache: List[Note] = []

    @property
    def query(self) -> str:
        return self._query

    def set_query(self, query: Optional[str]) -> None:
        """更新关键词"""
        self._query = query or ""

    def results(self, notes: NoteCollection) -> List[Note]:
        """当前关键词下的可见笔记"""
        key = (notes, self._query)
        if self._cache_key is None or self._cache_key[1] != key[1] or self._cache_key[0] is not notes:
            self._cache = filter_notes(notes, self._query)
            self._cache_key = key
        return list(self._cache)
