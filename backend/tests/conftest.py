import json
import logging

import pytest

from domains.core import reload_settings
from domains.note_hub.core.store import NoteStore
from domains.note_hub.persistence import MemoryBackend, PersistenceGateway
from domains.note_hub.services.note_service import reset_note_service


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("NOTEPAD_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("NOTEPAD_STORAGE_PATH", str(tmp_path / "notes.json"))
    reload_settings()
    reset_note_service()
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    # CLI 测试会把日志 handler 绑到 capsys 的临时流上
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_note_service()
    monkeypatch.undo()
    reload_settings()


def _blob(*records) -> str:
    return json.dumps([{"id": i, "title": t, "description": d} for i, t, d in records])


@pytest.fixture
def blob():
    return _blob


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def gateway(backend: MemoryBackend) -> PersistenceGateway:
    return PersistenceGateway(backend)


@pytest.fixture
def store(gateway: PersistenceGateway) -> NoteStore:
    return NoteStore(gateway)
