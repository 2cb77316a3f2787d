import asyncio
import json
import logging

import pytest

from domains.core import ConfigurationError, PersistenceError, reload_settings
from domains.note_hub.core.models import Note
from domains.note_hub.persistence import (
    JsonFileBackend,
    MemoryBackend,
    PersistenceGateway,
    create_backend,
    repair_duplicate_ids,
)


def test_load_returns_empty_collection_when_key_absent(gateway) -> None:
    assert asyncio.run(gateway.load()) == ()


def test_load_decodes_saved_collection(blob) -> None:
    backend = MemoryBackend({"notes": blob((1, "Milk", "buy"), (2, "Eggs", "dozen"))})
    notes = asyncio.run(PersistenceGateway(backend).load())
    assert notes == (Note(1, "Milk", "buy"), Note(2, "Eggs", "dozen"))


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"id": 1, "title": "object instead of list"}),
        json.dumps([{"id": "x", "title": "bad id"}]),
        json.dumps([{"id": 1}]),
        '[{"id": Infinity, "title": "overflowing id"}]',
        '[{"id": -Infinity, "title": "overflowing id"}]',
        '[{"id": NaN, "title": "nan id"}]',
        "[" * 100000 + "]" * 100000,
        json.dumps(json.dumps(json.dumps([]))),
    ],
    ids=[
        "invalid-json",
        "object",
        "non-numeric-id",
        "missing-title",
        "infinite-id",
        "negative-infinite-id",
        "nan-id",
        "deeply-nested",
        "triple-encoded",
    ],
)
def test_load_returns_empty_collection_when_blob_cannot_be_decoded(raw, caplog) -> None:
    caplog.set_level(logging.INFO)
    gateway = PersistenceGateway(MemoryBackend({"notes": raw}))
    assert asyncio.run(gateway.load()) == ()
    assert "notes_decode_failed" in caplog.text


def test_load_unwraps_double_encoded_blob(blob) -> None:
    backend = MemoryBackend({"notes": json.dumps(blob((1, "Milk", "buy")))})
    assert asyncio.run(PersistenceGateway(backend).load()) == (Note(1, "Milk", "buy"),)


def test_load_backend_failure_raises_persistence_error(backend, gateway) -> None:
    backend.fail_reads = True
    with pytest.raises(PersistenceError) as exc_info:
        asyncio.run(gateway.load())
    assert exc_info.value.operation == "load"
    assert exc_info.value.http_status_code == 502
    assert isinstance(exc_info.value.cause, ConnectionError)


def test_save_overwrites_key_with_full_collection(backend, gateway) -> None:
    async def scenario() -> None:
        await gateway.save((Note(1, "Milk", "buy"),))
        await gateway.save((Note(1, "Milk", "buy"), Note(2, "Eier", "Dutzend, frisch")))

    asyncio.run(scenario())
    assert json.loads(backend.peek("notes")) == [
        {"id": 1, "title": "Milk", "description": "buy"},
        {"id": 2, "title": "Eier", "description": "Dutzend, frisch"},
    ]
    assert backend.writes == 2


def test_save_uses_configured_key(backend) -> None:
    asyncio.run(PersistenceGateway(backend, key="popup-notes").save((Note(1, "a"),)))
    assert backend.peek("notes") is None
    assert backend.peek("popup-notes") is not None


def test_save_backend_failure_raises_persistence_error(backend, gateway) -> None:
    backend.fail_writes = True
    with pytest.raises(PersistenceError) as exc_info:
        asyncio.run(gateway.save((Note(1, "Milk"),)))
    assert exc_info.value.operation == "save"
    assert backend.peek("notes") is None


def test_repair_duplicate_ids_reassigns_later_duplicates() -> None:
    notes = (Note(1, "a"), Note(2, "b"), Note(2, "c"), Note(1, "d"))
    repaired = repair_duplicate_ids(notes)
    assert [n.title for n in repaired] == ["a", "b", "c", "d"]
    assert [n.id for n in repaired] == [1, 2, 3, 4]


def test_repair_duplicate_ids_returns_input_when_unique() -> None:
    notes = (Note(1, "a"), Note(5, "b"))
    assert repair_duplicate_ids(notes) is notes


def test_load_repairs_duplicates_written_by_length_based_ids(blob) -> None:
    # 旧客户端：创建 1、2，删除 1，再创建得到 id = len + 1 = 2
    backend = MemoryBackend({"notes": blob((2, "Eggs", ""), (2, "Bread", ""))})
    notes = asyncio.run(PersistenceGateway(backend).load())
    assert [n.id for n in notes] == [2, 3]


def test_file_backend_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "store.json"

    async def scenario() -> tuple:
        await PersistenceGateway(JsonFileBackend(path)).save((Note(1, "Milk", "buy"),))
        return await PersistenceGateway(JsonFileBackend(path)).load()

    assert asyncio.run(scenario()) == (Note(1, "Milk", "buy"),)
    assert isinstance(json.loads(path.read_text(encoding="utf-8"))["notes"], str)


def test_file_backend_missing_file_loads_empty(tmp_path) -> None:
    gateway = PersistenceGateway(JsonFileBackend(tmp_path / "missing.json"))
    assert asyncio.run(gateway.load()) == ()


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_file_backend_corrupt_file_loads_empty_and_is_moved_aside(tmp_path, caplog, content) -> None:
    caplog.set_level(logging.INFO)
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")

    assert asyncio.run(PersistenceGateway(JsonFileBackend(path)).load()) == ()
    assert "file_backend_corrupt" in caplog.text
    assert not path.exists()
    assert (tmp_path / "store.json.corrupt").read_text(encoding="utf-8") == content


def test_file_backend_rewrites_corrupt_file_on_next_save(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")
    gateway = PersistenceGateway(JsonFileBackend(path))

    async def scenario() -> tuple:
        await gateway.save((Note(1, "Milk", "buy"),))
        return await gateway.load()

    assert asyncio.run(scenario()) == (Note(1, "Milk", "buy"),)


def test_create_backend_follows_settings(monkeypatch, tmp_path) -> None:
    assert isinstance(create_backend(reload_settings()), MemoryBackend)

    monkeypatch.setenv("NOTEPAD_STORAGE_BACKEND", "file")
    backend = create_backend(reload_settings())
    assert isinstance(backend, JsonFileBackend)
    assert backend.path == tmp_path / "notes.json"


def test_create_backend_rejects_unknown_backend() -> None:
    settings = reload_settings().model_copy(update={"storage_backend": "sqlite"})
    with pytest.raises(ConfigurationError):
        create_backend(settings)


class FakeRedis:
    def __init__(self) -> None:
        self.data = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value

    async def aclose(self):
        self.closed = True


def test_redis_backend_stores_blob_under_key() -> None:
    from domains.note_hub.persistence.redis_backend import RedisBackend

    client = FakeRedis()
    client.data["notes"] = json.dumps([{"id": 1, "title": "Milk", "description": "buy"}]).encode("utf-8")
    gateway = PersistenceGateway(RedisBackend("redis://localhost:6379/0", client=client))

    async def scenario() -> tuple:
        loaded = await gateway.load()
        await gateway.save(loaded + (Note(2, "Eggs", "dozen"),))
        await gateway.close()
        return loaded

    assert asyncio.run(scenario()) == (Note(1, "Milk", "buy"),)
    assert [r["id"] for r in json.loads(client.data["notes"])] == [1, 2]
    assert client.closed
