from __future__ import annotations

import threading

import pytest

from ocontext.core import Cancelled, ProblemKind
from ocontext.pipeline import generate
from ocontext.preflight import PreflightGate


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_text("hello", encoding="utf-8")
    (root / "b.bin").write_bytes(bytes([0, 1, 2]))
    (root / ".gitignore").write_text("b.bin\n", encoding="utf-8")
    return root


def test_folder_scenario(project, tmp_path):
    out = tmp_path / "context.txt"
    result = generate([project], out, root=project)
    assert not result.declined
    assert result.out_path == out
    assert out.read_text(encoding="utf-8") == (
        "# Context Generation Request\n\n"
        "## Project Structure:\n```\na.txt\n```\n\n"
        "## File Contents:\n\n"
        "### a.txt\n```\nhello\n```\n\n"
    )


def test_explicit_ignored_file_is_included(project, tmp_path):
    out = tmp_path / "context.txt"
    result = generate([project / "b.bin"], out, root=project)
    doc = out.read_text(encoding="utf-8")
    assert "```\nb.bin\n```" in doc
    # binary, so listed only
    assert "### b.bin" not in doc
    assert result.assembly.binary == ["b.bin"]


def test_declined_preflight_writes_nothing(project, tmp_path):
    out = tmp_path / "context.txt"
    asked = []

    def confirm(decision):
        asked.append(decision)
        return False

    result = generate([project], out, root=project, confirm=confirm, gate=PreflightGate(max_files=0))
    assert result.declined
    assert result.assembly is None
    assert len(asked) == 1 and asked[0].requires_confirmation
    assert not out.exists()


def test_missing_confirm_callback_declines(project, tmp_path):
    out = tmp_path / "context.txt"
    result = generate([project], out, root=project, gate=PreflightGate(max_bytes=0))
    assert result.declined
    assert not out.exists()


def test_confirmed_preflight_proceeds(project, tmp_path):
    out = tmp_path / "context.txt"
    result = generate(
        [project], out, root=project, confirm=lambda d: True, gate=PreflightGate(max_files=0)
    )
    assert not result.declined
    assert out.exists()


def test_confirm_not_called_for_small_runs(project, tmp_path):
    def confirm(decision):
        raise AssertionError("should not ask")

    generate([project], tmp_path / "context.txt", root=project, confirm=confirm)


def test_problems_are_collected(project, tmp_path):
    result = generate([project / "missing.txt", project / "a.txt"], tmp_path / "c.txt", root=project)
    assert [p.kind for p in result.problems] == [ProblemKind.INPUT_NOT_FOUND]
    assert [e.relative_path for e in result.entries] == ["a.txt"]


def test_extra_patterns(project, tmp_path):
    (project / "notes.md").write_text("n", encoding="utf-8")
    result = generate([project], tmp_path / "c.txt", root=project, extra_patterns=["*.md"])
    assert [e.relative_path for e in result.entries] == ["a.txt"]


def test_stdout_sink(project, capsys):
    generate([project / "a.txt"], "-", root=project)
    assert "### a.txt\n```\nhello\n```" in capsys.readouterr().out


def test_cancelled_run(project, tmp_path):
    event = threading.Event()
    event.set()
    with pytest.raises(Cancelled):
        generate([project], tmp_path / "c.txt", root=project, cancel_event=event)


def test_output_inside_selection_is_not_listed(project):
    out = project / "context.txt"
    generate([project], out, root=project, default_patterns=())
    first = out.read_text(encoding="utf-8")
    result = generate([project], out, root=project, default_patterns=())
    assert [e.relative_path for e in result.entries] == [".gitignore", "a.txt"]
    assert out.read_text(encoding="utf-8") == first
