"""
Streaming writer for the context document.

Layout::

    # Context Generation Request

    ## Project Structure:
    ```
    <relative path per entry>
    ```

    ## File Contents:

    ### <relative path>
    ```
    <content | [unreadable]>
    ```

Binary files are listed in the structure section but get no content
section. Files are read and written one at a time, in entry order.
"""

from __future__ import annotations

import io
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO, Union

from colorama import Fore

from .binary import is_binary
from .core import OutputError, Problem, ProblemKind, check_cancelled, report, report_problem
from .expand import FileEntry

UNREADABLE_MARKER = "[unreadable]"
FENCE = "```"


@dataclass
class AssemblyReport:
    rendered: List[str] = field(default_factory=list)
    binary: List[str] = field(default_factory=list)
    unreadable: List[Problem] = field(default_factory=list)


def _header(entries: Sequence[FileEntry]) -> str:
    listing = "\n".join(e.relative_path for e in entries)
    return (
        "# Context Generation Request\n\n"
        f"## Project Structure:\n{FENCE}\n{listing}\n{FENCE}\n\n"
        "## File Contents:\n\n"
    )


def _write(sink: TextIO, text: str) -> None:
    try:
        sink.write(text)
    except (OSError, ValueError) as e:
        raise OutputError(f"Could not write to output: {e}") from e


def assemble(
    entries: Sequence[FileEntry],
    sink: TextIO,
    cancel_event=None,
    verbose: bool = False,
) -> AssemblyReport:
    """Stream the document for *entries* to *sink*.

    An unreadable file gets an ``[unreadable]`` section and the run goes
    on; write failures raise :class:`OutputError`.
    """
    result = AssemblyReport()
    _write(sink, _header(entries))

    for entry in entries:
        check_cancelled(cancel_event)
        rel = entry.relative_path
        try:
            with open(entry.absolute_path, "rb") as fh:
                raw = fh.read()
        except OSError as e:
            problem = Problem(entry.absolute_path, ProblemKind.READ_FAILURE, e.strerror or str(e))
            result.unreadable.append(problem)
            report_problem(problem, verbose)
            _write(sink, f"### {rel}\n{FENCE}\n{UNREADABLE_MARKER}\n{FENCE}\n\n")
            continue

        if is_binary(raw):
            result.binary.append(rel)
            if verbose:
                report(f"- Skipping binary file {rel}", Fore.YELLOW)
            continue

        text = raw.decode("utf-8", errors="replace")
        _write(sink, f"### {rel}\n{FENCE}\n")
        _write(sink, text)
        _write(sink, f"\n{FENCE}\n\n")
        result.rendered.append(rel)

    return result


def build_prompt(entries: Sequence[FileEntry], verbose: bool = False) -> str:
    """In-memory variant of :func:`assemble`; meant for small selections."""
    buf = io.StringIO()
    assemble(entries, buf, verbose=verbose)
    return buf.getvalue()


@contextmanager
def open_sink(out_path: Union[str, Path, None]) -> Iterator[TextIO]:
    """Open the output file (``"-"`` or ``None`` for stdout) and flush/close it on exit.

    Failing to open, flush or close the file raises :class:`OutputError`;
    a partially written file is left in place.
    """
    if out_path is None or str(out_path) == "-":
        yield sys.stdout
        try:
            sys.stdout.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"Could not flush stdout: {e}") from e
        return

    out_path = Path(out_path)
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    out_dir = out_path.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create output directory '{out_dir}': {e}")

    try:
        fh = out_path.open("w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise OutputError(f"Could not open output file '{out_path}': {e}")

    failed = True
    try:
        yield fh
        failed = False
    finally:
        try:
            fh.close()
        except OSError as e:
            if not failed:
                raise OutputError(f"Could not close output file '{out_path}': {e}") from e
            # the error already propagating is the one the caller sees
            report(f"! Could not close output file '{out_path}': {e}", Fore.RED)


def output_size(out_path: Optional[Path]) -> int:
    if out_path is None or str(out_path) == "-":
        return 0
    try:
        return os.stat(out_path).st_size
    except OSError:
        return 0
