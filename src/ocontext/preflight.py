"""
Size/count check performed before committing to a full assembly run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence

from .expand import FileEntry

DEFAULT_MAX_FILES = 1000
DEFAULT_MAX_BYTES = 10 * 2**20


@dataclass(frozen=True)
class PreflightDecision:
    total_files: int
    estimated_bytes: int
    requires_confirmation: bool

    @property
    def estimated_mb(self) -> float:
        return self.estimated_bytes / 1024 / 1024

    def prompt(self) -> str:
        return f"About to include {self.total_files} files (~{self.estimated_mb:.1f} MB). Continue?"


class PreflightGate:
    """Flags selections with more than *max_files* files or *max_bytes* bytes."""

    def __init__(self, max_files: int = DEFAULT_MAX_FILES, max_bytes: int = DEFAULT_MAX_BYTES):
        self.max_files = max_files
        self.max_bytes = max_bytes

    def evaluate(self, entries: Sequence[FileEntry]) -> PreflightDecision:
        total_files = len(entries)
        estimated_bytes = 0
        for entry in entries:
            try:
                estimated_bytes += os.stat(entry.absolute_path).st_size
            except OSError:
                # reported by the assembler when it tries to read it
                continue

        return PreflightDecision(
            total_files=total_files,
            estimated_bytes=estimated_bytes,
            requires_confirmation=total_files > self.max_files or estimated_bytes > self.max_bytes,
        )
