import asyncio

import pytest

from domains.core import NoteNotFoundError, SessionStateError, ValidationError
from domains.note_hub.core.models import FormData, Note
from domains.note_hub.core.session import EditSession, SessionMode, SessionState


def test_new_session_is_idle(store) -> None:
    session = EditSession(store)
    assert session.state == SessionState.idle()
    assert session.form is None
    assert not session.is_open
    assert str(session.state) == "idle"


def test_open_create_shows_blank_form(store) -> None:
    session = EditSession(store)
    session.open_create()
    assert session.state.mode == SessionMode.CREATING
    assert session.form == FormData.blank()


def test_submit_while_creating_adds_note(store) -> None:
    session = EditSession(store)

    async def scenario() -> int:
        session.open_create()
        note_id = session.submit(FormData("Eggs", "dozen"))
        await store.flush()
        return note_id

    note_id = asyncio.run(scenario())
    assert store.get(note_id) == Note(note_id, "Eggs", "dozen")
    assert session.state == SessionState.idle()
    assert session.last_submitted_id == note_id


def test_open_edit_prefills_form_and_toggles_closed(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        store.create("Milk", "buy")
        assert session.open_edit(1) == SessionState.editing(1)
        assert session.form == FormData("Milk", "buy")
        assert str(session.state) == "editing(1)"

        assert session.open_edit(1) == SessionState.idle()
        assert session.form is None
        await store.flush()

    asyncio.run(scenario())


def test_open_edit_switches_between_notes(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        store.create("a", "1")
        store.create("b", "2")
        session.open_edit(1)
        session.open_edit(2)
        assert session.state == SessionState.editing(2)
        assert session.form == FormData("b", "2")
        await store.flush()

    asyncio.run(scenario())


def test_submit_while_editing_updates_note(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        store.create("Eggs", "dozen")
        session.open_edit(1)
        session.update_form(description="buy 2 dozen")
        assert session.submit() == 1
        await store.flush()

    asyncio.run(scenario())
    assert store.notes == (Note(1, "Eggs", "buy 2 dozen"),)
    assert session.state == SessionState.idle()


def test_update_form_keeps_unspecified_fields(store) -> None:
    session = EditSession(store)
    session.open_create()
    session.update_form(title="Bread")
    assert session.update_form(description="rye") == FormData("Bread", "rye")


def test_open_edit_unknown_note_raises_not_found(store) -> None:
    session = EditSession(store)
    with pytest.raises(NoteNotFoundError):
        session.open_edit(99)
    assert session.state == SessionState.idle()


def test_invalid_transitions_raise_session_state_error(store) -> None:
    session = EditSession(store)

    with pytest.raises(SessionStateError):
        session.submit()
    with pytest.raises(SessionStateError):
        session.update_form(title="x")

    session.open_create()
    with pytest.raises(SessionStateError) as exc_info:
        session.open_create()
    assert exc_info.value.http_status_code == 409
    with pytest.raises(SessionStateError):
        session.open_edit(1)
    assert session.state.mode == SessionMode.CREATING


def test_open_create_while_editing_is_rejected(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        store.create("a")
        session.open_edit(1)
        with pytest.raises(SessionStateError):
            session.open_create()
        assert session.state == SessionState.editing(1)
        await store.flush()

    asyncio.run(scenario())


def test_submit_with_empty_title_keeps_session_open(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        session.open_create()
        session.update_form(description="no title")
        with pytest.raises(ValidationError):
            session.submit()
        assert session.state.mode == SessionMode.CREATING
        assert session.form == FormData("", "no title")
        await store.flush()

    asyncio.run(scenario())
    assert store.notes == ()


def test_submit_for_deleted_note_returns_to_idle(store) -> None:
    session = EditSession(store)

    async def scenario():
        store.create("a")
        session.open_edit(1)
        store.delete(1)
        result = session.submit(FormData("changed", ""))
        await store.flush()
        return result

    assert asyncio.run(scenario()) is None
    assert session.state == SessionState.idle()
    assert session.last_submitted_id is None
    assert store.notes == ()


def test_cancel_discards_draft(store) -> None:
    session = EditSession(store)
    session.open_create()
    session.update_form(title="draft")
    session.cancel()
    assert session.state == SessionState.idle()
    assert session.form is None
    assert store.notes == ()


def test_close_if_editing_only_closes_matching_session(store) -> None:
    session = EditSession(store)

    async def scenario() -> None:
        store.create("a")
        store.create("b")
        session.open_edit(2)
        assert session.close_if_editing(1) is False
        assert session.close_if_editing(2) is True
        assert not session.is_open
        await store.flush()

    asyncio.run(scenario())
