import pytest

from rosterbook import api
from rosterbook.cli import main
from rosterbook.session import RESET_PHRASE


@pytest.fixture
def db_args(tmp_path):
    return ["--db", str(tmp_path / "roster.sqlite")]


def _add(db_args, name, position, value, style="Classic No. 10"):
    return main([*db_args, "add", "--name", name, "--position", position, "--style", style, "--value", value])


def test_add_list_and_stats(db_args, capsys):
    assert _add(db_args, "Keeper", "GK", "12") == 0
    assert _add(db_args, "Nine", "CF", "40") == 0
    assert main([*db_args, "target", "100"]) == 0
    capsys.readouterr()

    assert main([*db_args, "list"]) == 0
    out = capsys.readouterr().out
    assert out.index("Nine") < out.index("Keeper")
    assert "Total: 52" in out
    assert "Remaining: 48" in out

    assert main([*db_args, "--cap", "21", "stats"]) == 0
    assert "Open slots: 19/21" in capsys.readouterr().out


def test_edit_keeps_unspecified_fields(db_args, capsys):
    _add(db_args, "Nine", "CF", "40")
    assert main([*db_args, "edit", "0", "--value", "55"]) == 0
    capsys.readouterr()

    main([*db_args, "list"])
    out = capsys.readouterr().out
    assert "Nine" in out
    assert "55" in out
    assert "Total: 55" in out


def test_invalid_input_reports_error(db_args, capsys):
    assert _add(db_args, "Nine", "select", "40") == 1
    assert "Select a position" in capsys.readouterr().err
    assert main([*db_args, "target", "plenty"]) == 1


def test_delete_and_reset_prompts(db_args, capsys, monkeypatch):
    _add(db_args, "Nine", "CF", "40")
    _add(db_args, "Keeper", "GK", "12")

    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert main([*db_args, "delete", "1"]) == 0
    assert "Delete cancelled" in capsys.readouterr().out

    assert main([*db_args, "delete", "1", "--yes"]) == 0

    monkeypatch.setattr("builtins.input", lambda prompt: "RESET")
    assert main([*db_args, "reset"]) == 0
    capsys.readouterr()

    main([*db_args, "list"])
    assert "No players added yet." in capsys.readouterr().out


def test_reset_phrase_matches_web_ui(db_args, capsys, monkeypatch):
    _add(db_args, "Nine", "CF", "40")
    prompts = []

    def answer(prompt):
        prompts.append(prompt)
        return RESET_PHRASE.lower()

    monkeypatch.setattr("builtins.input", answer)
    assert main([*db_args, "reset"]) == 0
    assert "Reset cancelled" in capsys.readouterr().out
    assert f"Type {RESET_PHRASE} to confirm" in prompts[0]
    assert api.RESET_PHRASE == RESET_PHRASE


def test_unusable_storage_exits_with_error(tmp_path, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    assert main(["--db", str(blocker / "roster.sqlite"), "list"]) == 2
    assert "Roster storage unavailable" in capsys.readouterr().err
