"""Tests for the notemark CLI."""

import json

import pytest

from notemark import __version__
from notemark.cli import main


@pytest.fixture
def notes(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "notes"
    root.mkdir()
    (root / "todo.md").write_text("---\ntitle: Todo\n---\n# Todo\n* Call Bob\n- [x] Pay rent\n")
    return root


def run(root, *argv):
    with pytest.raises(SystemExit) as exc:
        main(["--root", str(root), *argv])
    return exc.value.code


def test_version_flag(capsys):
    """Test that --version shows the package version."""
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert f"notemark {__version__}" in out
    assert "python" in out


def test_tasks_command(notes, capsys):
    """Test task listing output."""
    assert run(notes, "tasks", "todo") == 0
    out = capsys.readouterr().out
    assert "   4  [open     ]  Call Bob" in out
    assert "   5  [done     ]  Pay rent" in out


def test_json_output(notes, capsys):
    """Test --json prints the raw tool result."""
    assert run(notes, "--json", "paragraphs", "todo.md") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["lines"][0]["type"] == "title"


def test_add_task_and_complete(notes):
    """Test writing commands change the note file."""
    assert run(notes, "-q", "add-task", "todo", "Buy milk", "--position", "after-heading",
               "--heading", "Todo") == 0
    assert run(notes, "-q", "complete", "todo", "4") == 0
    content = (notes / "todo.md").read_text()
    assert "# Todo\n* [x] Buy milk\n* Call Bob" in content


def test_delete_runs_without_token(notes, capsys):
    """Test the CLI deletes directly and previews on --dry-run."""
    assert run(notes, "delete", "todo", "3", "3", "--dry-run") == 0
    assert "- [x] Pay rent" in capsys.readouterr().out

    assert run(notes, "-q", "delete", "todo", "3", "3") == 0
    assert "Pay rent" not in (notes / "todo.md").read_text()


def test_meta_show_and_set(notes, capsys):
    """Test frontmatter commands."""
    assert run(notes, "-q", "meta", "set", "todo", "status", "open") == 0
    assert run(notes, "meta", "show", "todo") == 0
    assert capsys.readouterr().out == "title: Todo\nstatus: open\n"


def test_error_exit_code(notes, capsys):
    """Test failures print to stderr and exit 1."""
    assert run(notes, "tasks", "nope") == 1
    assert "Error: Note not found: nope" in capsys.readouterr().err

    assert run(notes, "edit-line", "todo", "99", "x") == 1
    assert "does not exist" in capsys.readouterr().err
