import json

import pytest

from domains.note_hub.cli.main import build_parser, main


@pytest.fixture
def notes_file(monkeypatch, tmp_path):
    path = tmp_path / "cli-notes.json"
    monkeypatch.setenv("NOTEPAD_STORAGE_BACKEND", "file")
    monkeypatch.setenv("NOTEPAD_STORAGE_PATH", str(path))
    return path


def _stored(path) -> list:
    return json.loads(json.loads(path.read_text(encoding="utf-8"))["notes"])


def test_add_and_list(notes_file, capsys) -> None:
    assert main(["add", "Milk", "buy"]) == 0
    assert main(["add", "Eggs"]) == 0
    assert "已创建笔记: 2" in capsys.readouterr().out

    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "[1] Milk" in out
    assert "    buy" in out
    assert "[2] Eggs" in out
    assert "共 2 / 2 条笔记" in out


def test_list_with_search(notes_file, capsys) -> None:
    main(["add", "Milk", "buy"])
    main(["add", "Eggs", "dozen"])
    capsys.readouterr()

    assert main(["list", "--search", "DOZ"]) == 0
    out = capsys.readouterr().out
    assert "[2] Eggs" in out
    assert "Milk" not in out
    assert "共 1 / 2 条笔记" in out


def test_edit_keeps_unspecified_fields(notes_file) -> None:
    main(["add", "Eggs", "dozen"])
    assert main(["edit", "1", "--description", "buy 2 dozen"]) == 0
    assert _stored(notes_file) == [{"id": 1, "title": "Eggs", "description": "buy 2 dozen"}]


def test_delete_and_show(notes_file, capsys) -> None:
    main(["add", "Milk"])
    main(["add", "Eggs"])
    assert main(["delete", "1"]) == 0
    capsys.readouterr()

    assert main(["show", "1"]) == 1
    assert "笔记不存在: 1" in capsys.readouterr().err
    assert main(["show", "2"]) == 0
    assert "[2] Eggs" in capsys.readouterr().out

    # 删除后新建的 ID 不复用
    main(["add", "Bread"])
    assert [r["id"] for r in _stored(notes_file)] == [2, 3]


def test_missing_note_commands_fail(notes_file, capsys) -> None:
    assert main(["edit", "5", "--title", "x"]) == 1
    assert main(["delete", "5"]) == 1
    assert "笔记不存在: 5" in capsys.readouterr().err


def test_blank_title_reports_error(notes_file, capsys) -> None:
    assert main(["add", "  "]) == 1
    assert "错误: 标题不能为空" in capsys.readouterr().err
    assert not notes_file.exists()


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "notepad" in capsys.readouterr().out


def test_parser_wires_serve_command() -> None:
    args = build_parser().parse_args(["serve"])
    assert args.func.__name__ == "cmd_serve"
