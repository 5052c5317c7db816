"""
Expansion of a mixed file/folder selection into a flat list of
:class:`FileEntry` objects.

Enumeration order
-----------------
Inputs are processed in the order given. A directory is walked depth-first;
inside each directory its files come first, then its subdirectories, both
in lexical (code point) order. Symlinked directories are not descended
into; symlinked files are listed like regular files. An absolute path is
only emitted once per run: later duplicates are dropped.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from .core import Problem, ProblemKind, check_cancelled, report, report_problem
from .ignore import IgnoreMatcher, PathLike


@dataclass(frozen=True)
class FileEntry:
    """One file to include; identity is :attr:`absolute_path`."""

    absolute_path: str
    relative_path: str = field(compare=False)


def relative_to_root(path: str, root: Optional[str]) -> str:
    """Forward-slash path of *path* relative to *root*; *path* unchanged if no root."""
    if not root:
        return path
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        return Path(path).as_posix()
    return Path(rel).as_posix()


def _walk_files(
    top: str,
    matcher: IgnoreMatcher,
    problems: List[Problem],
    verbose: bool,
) -> Iterator[str]:
    def on_error(err: OSError) -> None:
        problem = Problem(err.filename or top, ProblemKind.UNLISTABLE_DIRECTORY, err.strerror or str(err))
        problems.append(problem)
        report_problem(problem, verbose)

    for dirpath, dirnames, filenames in os.walk(top, onerror=on_error, followlinks=False):
        dirnames[:] = sorted(
            d for d in dirnames if matcher.allows(os.path.join(dirpath, d), is_dir=True)
        )
        for name in sorted(filenames):
            full = os.path.join(dirpath, name)
            if matcher.allows(full):
                yield full


def expand(
    root: Optional[PathLike],
    inputs: Iterable[PathLike],
    matcher: Optional[IgnoreMatcher] = None,
    problems: Optional[List[Problem]] = None,
    cancel_event=None,
    verbose: bool = False,
) -> List[FileEntry]:
    """Enumerate the candidate files for *inputs*.

    Directory contents are filtered through *matcher* (built from *root*
    when not given). Files passed directly are included as-is, even if an
    ignore rule matches them. Inputs that cannot be stat'ed are recorded
    in *problems* and skipped.
    """
    root_str = os.path.abspath(os.fspath(root)) if root else None
    if matcher is None:
        matcher = IgnoreMatcher.build(root_str)
    if problems is None:
        problems = []

    entries: List[FileEntry] = []
    seen: Set[str] = set()

    def add(path: str) -> None:
        if path in seen:
            return
        seen.add(path)
        entries.append(FileEntry(path, relative_to_root(path, root_str)))

    for raw in inputs:
        check_cancelled(cancel_event)
        given = os.fspath(raw)
        abs_path = os.path.abspath(given)
        try:
            st = os.stat(abs_path)
        except OSError as e:
            problem = Problem(given, ProblemKind.INPUT_NOT_FOUND, e.strerror or str(e))
            problems.append(problem)
            report_problem(problem, verbose)
            continue

        if stat.S_ISDIR(st.st_mode):
            before = len(entries)
            for path in _walk_files(abs_path, matcher, problems, verbose):
                add(path)
            if verbose:
                report(f"{given}: {len(entries) - before} files")
        else:
            add(abs_path)

    return entries
