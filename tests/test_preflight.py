from __future__ import annotations

from ocontext.expand import FileEntry
from ocontext.preflight import PreflightGate


def _entries(tmp_path, count, size=0):
    entries = []
    for i in range(count):
        path = tmp_path / f"f{i}.txt"
        path.write_bytes(b"x" * size)
        entries.append(FileEntry(str(path), path.name))
    return entries


def test_many_files_require_confirmation(tmp_path):
    decision = PreflightGate().evaluate(_entries(tmp_path, 1001))
    assert decision.total_files == 1001
    assert decision.requires_confirmation


def test_exactly_at_file_limit_is_fine(tmp_path):
    assert not PreflightGate().evaluate(_entries(tmp_path, 1000)).requires_confirmation


def test_small_selection_passes(tmp_path):
    decision = PreflightGate().evaluate(_entries(tmp_path, 5, size=200))
    assert decision.total_files == 5
    assert decision.estimated_bytes == 1000
    assert not decision.requires_confirmation


def test_byte_limit(tmp_path):
    decision = PreflightGate(max_bytes=100).evaluate(_entries(tmp_path, 2, size=60))
    assert decision.estimated_bytes == 120
    assert decision.requires_confirmation


def test_missing_file_counts_zero_bytes(tmp_path):
    entries = _entries(tmp_path, 1, size=10)
    entries.append(FileEntry(str(tmp_path / "gone.txt"), "gone.txt"))
    decision = PreflightGate().evaluate(entries)
    assert decision.total_files == 2
    assert decision.estimated_bytes == 10


def test_prompt_text(tmp_path):
    decision = PreflightGate().evaluate(_entries(tmp_path, 3))
    assert decision.prompt() == "About to include 3 files (~0.0 MB). Continue?"
