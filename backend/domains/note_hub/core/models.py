"""
笔记数据模型定义

笔记是一条带唯一 ID 的标题/描述记录。
集合以不可变快照（tuple）的形式在各组件间传递，
NoteStore 每次变更都生成新的快照，不修改已交出的快照。
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class Note:
    """
    笔记数据类

    Attributes:
        id: 笔记 ID，由 NoteStore 创建时分配，之后不可变
        title: 笔记标题（非空）
        description: 笔记描述，可以为空
    """
    id: int
    title: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """转换为持久化记录"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Note':
        """
        从持久化记录创建笔记实例

        兼容旧数据中字符串形式的数字 ID（如 "3"）和缺失的描述。

        Raises:
            ValueError: 记录结构不合法
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"note record must be an object, got {type(data).__name__}")

        raw_id = data.get('id')
        if isinstance(raw_id, bool) or raw_id is None:
            raise ValueError(f"invalid note id: {raw_id!r}")
        try:
            note_id = int(raw_id)
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"invalid note id: {raw_id!r}") from None
        if isinstance(raw_id, float) and raw_id != note_id:
            raise ValueError(f"invalid note id: {raw_id!r}")

        title = data.get('title')
        description = data.get('description', "")
        if description is None:
            description = ""
        if not isinstance(title, str) or not isinstance(description, str):
            raise ValueError(f"invalid title/description for note {note_id}")

        return cls(id=note_id, title=title, description=description)

    def with_content(self, title: str, description: str) -> 'Note':
        """返回同 ID、新内容的副本"""
        return replace(self, title=title, description=description)

    def matches(self, needle: str) -> bool:
        """标题或描述是否包含已转为小写的关键词"""
        return needle in self.title.lower() or needle in self.description.lower()


# 笔记集合快照：有序、不可变
NoteCollection = Tuple[Note, ...]


@dataclass(frozen=True)
class FormData:
    """编辑表单数据"""
    title: str = ""
    description: str = ""

    @classmethod
    def blank(cls) -> 'FormData':
        return cls()

    @classmethod
    def from_note(cls, note: Note) -> 'FormData':
        return cls(title=note.title, description=note.description)
