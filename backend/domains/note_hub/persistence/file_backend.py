"""
JSON 文件键值后端

所有键保存在同一个 JSON 对象文件中。
读写在线程池中执行，写入使用临时文件 + os.replace 保证原子替换。
文件无法解析时移到 *.corrupt 并按空文件处理，下一次写入重新生成。
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .base import KeyValueBackend

logger = logging.getLogger(__name__)


class JsonFileBackend(KeyValueBackend):
    """
    JSON 文件键值后端

    文件格式：
        {"notes": "[{\\"id\\": 1, \\"title\\": \\"Milk\\", \\"description\\": \\"buy\\"}]"}
    """

    name = "file"

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileBackend(path={str(self.path)!r})"

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return self._quarantine(f"{type(e).__name__}: {e}")
        if not isinstance(raw, dict):
            return self._quarantine(f"top level is {type(raw).__name__}, not an object")
        return raw

    def _quarantine(self, reason: str) -> Dict[str, Any]:
        """无法解析的数据文件移到 *.corrupt，之后按空文件处理"""
        corrupt_path = self.path.with_suffix(self.path.suffix + ".corrupt")
        os.replace(self.path, corrupt_path)
        logger.warning(f"file_backend_corrupt: {self.path} moved to {corrupt_path.name}, {reason}")
        return {}

    def _write_key(self, key: str, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self._read_all()
        data[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            # 兼容直接存放为 JSON 结构的旧文件
            return json.dumps(value, ensure_ascii=False)
        return value

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write_key, key, value)
        logger.debug(f"file_backend_written: {self.path} key={key}")
