"""
Shared pieces for ocontext: exceptions, per-item problem records and the
verbose console reporter.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()


# Exceptions
class OContextError(Exception):
    """Base exception for ocontext errors."""
    pass


class ConfigFileError(OContextError):
    """Raised when an extra-patterns file cannot be used."""
    pass


class OutputError(OContextError):
    """Raised when the output sink cannot be opened, written or closed."""
    pass


class Cancelled(OContextError):
    """Raised at a step boundary once the caller asked to stop."""
    pass


# Per-item failures (recorded, never raised)
class ProblemKind(Enum):
    INPUT_NOT_FOUND = "input-not-found"
    UNLISTABLE_DIRECTORY = "unlistable-directory"
    READ_FAILURE = "read-failure"


@dataclass(frozen=True)
class Problem:
    path: str
    kind: ProblemKind
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.path} ({self.detail})"
        return f"{self.kind.value}: {self.path}"


def check_cancelled(cancel_event) -> None:
    """Raise :class:`Cancelled` if *cancel_event* (anything with ``is_set``) fired."""
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled("Operation cancelled")


# Console reporting
def report(
    msg: str,
    color: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Print an ``[ocontext]`` line, coloured with colorama when *color* is given."""
    line = f"[ocontext] {msg}"
    if color:
        line = color + line + Style.RESET_ALL
    print(line, file=stream if stream is not None else sys.stderr)


def report_problem(problem: Problem, verbose: bool) -> None:
    if verbose:
        report(f"! {problem}", Fore.YELLOW)
