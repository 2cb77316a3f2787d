import pytest

from domains.note_hub.core.models import FormData, Note


def test_note_round_trips_through_record() -> None:
    note = Note(id=1, title="Milk", description="buy")
    assert note.to_dict() == {"id": 1, "title": "Milk", "description": "buy"}
    assert Note.from_dict(note.to_dict()) == note


def test_from_dict_accepts_legacy_string_id_and_missing_description() -> None:
    note = Note.from_dict({"id": "3", "title": "Eggs"})
    assert note == Note(id=3, title="Eggs", description="")


def test_from_dict_treats_null_description_as_empty() -> None:
    assert Note.from_dict({"id": 2, "title": "x", "description": None}).description == ""


@pytest.mark.parametrize(
    "record",
    [
        ["not", "a", "mapping"],
        {"title": "no id"},
        {"id": "abc", "title": "bad id"},
        {"id": True, "title": "bool id"},
        {"id": 1.5, "title": "fractional id"},
        {"id": 1, "title": 42},
        {"id": 1, "title": "ok", "description": ["bad"]},
    ],
)
def test_from_dict_rejects_malformed_records(record) -> None:
    with pytest.raises(ValueError):
        Note.from_dict(record)


def test_with_content_keeps_id() -> None:
    note = Note(id=7, title="a", description="b")
    changed = note.with_content("c", "d")
    assert changed == Note(id=7, title="c", description="d")
    assert note.title == "a"


def test_note_is_immutable() -> None:
    note = Note(id=1, title="Milk")
    with pytest.raises(AttributeError):
        note.title = "Bread"


def test_form_data_from_note_and_blank() -> None:
    assert FormData.blank() == FormData(title="", description="")
    assert FormData.from_note(Note(id=1, title="Milk", description="buy")) == FormData("Milk", "buy")
