"""
Ignore-rule handling: compiles the root ``.gitignore`` (plus built-in and
user-supplied patterns) and answers "is this path allowed?" queries.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pathspec

from .core import ConfigFileError

IGNORE_FILE_NAME = ".gitignore"

# Applied during directory expansion alongside the ignore file
DEFAULT_PATTERNS: List[str] = [
    ".git/",
    ".gitignore",
    ".ocontext/",  # generated output
]

PathLike = Union[str, "os.PathLike[str]"]


def _compile(lines: Iterable[str]) -> "pathspec.GitIgnoreSpec":
    return pathspec.GitIgnoreSpec.from_lines(lines)


def load_extra_patterns(config_path: Path) -> List[str]:
    """Read newline-separated patterns from *config_path*."""
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")

    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            return [ln.strip() for ln in fh if ln.strip() and not ln.lstrip().startswith("#")]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")


class IgnoreMatcher:
    """Immutable ignore rules for a single root directory.

    Matching is done on the path relative to ``root``. Paths outside the
    root, and every path when there is no root, are always allowed.
    A file inside an ignored directory is ignored too, even if a later
    negation names it (git cannot re-include files below an excluded
    directory, and neither do we).
    """

    __slots__ = ("_root", "_spec")

    def __init__(self, root: Optional[str], spec: Optional["pathspec.GitIgnoreSpec"]):
        self._root = root
        self._spec = spec

    @classmethod
    def allow_all(cls) -> "IgnoreMatcher":
        return cls(None, None)

    @classmethod
    def build(
        cls,
        root: Optional[PathLike],
        default_patterns: Sequence[str] = DEFAULT_PATTERNS,
        extra_patterns: Sequence[str] = (),
    ) -> "IgnoreMatcher":
        """Compile the rules for *root*.

        A missing or unreadable ``.gitignore`` is not an error: only the
        default patterns (``.git/``, ``.gitignore``, ``.ocontext/``) and the
        extra patterns apply then. Pass ``default_patterns=()`` to allow
        everything in that case. Undecodable bytes in the file are replaced,
        the remaining rules still apply.
        """
        if not root:
            return cls.allow_all()

        root_str = os.path.abspath(os.fspath(root))
        lines: List[str] = list(default_patterns)
        try:
            with open(os.path.join(root_str, IGNORE_FILE_NAME), "r", encoding="utf-8", errors="replace") as fh:
                lines.extend(line.rstrip("\n") for line in fh)
        except OSError:
            pass
        lines.extend(extra_patterns)

        if not any(ln.strip() and not ln.lstrip().startswith("#") for ln in lines):
            return cls(root_str, None)
        return cls(root_str, _compile(lines))

    @property
    def root(self) -> Optional[str]:
        return self._root

    def _relative(self, path: PathLike) -> Optional[str]:
        if self._root is None:
            return None
        abs_path = os.path.abspath(os.fspath(path))
        try:
            rel = os.path.relpath(abs_path, self._root)
        except ValueError:  # different drive
            return None
        if rel == os.curdir or rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return None
        return Path(rel).as_posix()

    def allows(self, path: PathLike, is_dir: bool = False) -> bool:
        """Return ``False`` when *path* is excluded by the rules."""
        if self._spec is None:
            return True
        rel = self._relative(path)
        if rel is None:
            return True

        parts = rel.split("/")
        for i in range(1, len(parts)):
            if self._spec.match_file("/".join(parts[:i]) + "/"):
                return False
        return not self._spec.match_file(rel + "/" if is_dir else rel)
