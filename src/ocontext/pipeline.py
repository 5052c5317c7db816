"""
End-to-end run: expand → preflight → assemble.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from colorama import Fore

from .assemble import AssemblyReport, assemble, open_sink, output_size
from .core import Problem, report
from .expand import FileEntry, expand
from .ignore import DEFAULT_PATTERNS, IgnoreMatcher, PathLike
from .preflight import PreflightDecision, PreflightGate

ConfirmCallback = Callable[[PreflightDecision], bool]


@dataclass
class RunResult:
    entries: List[FileEntry]
    decision: PreflightDecision
    declined: bool = False
    assembly: Optional[AssemblyReport] = None
    problems: List[Problem] = field(default_factory=list)
    out_path: Optional[Path] = None


def generate(
    inputs: Sequence[PathLike],
    out_path: Union[str, Path, None],
    root: Optional[PathLike] = None,
    confirm: Optional[ConfirmCallback] = None,
    gate: Optional[PreflightGate] = None,
    extra_patterns: Sequence[str] = (),
    default_patterns: Sequence[str] = DEFAULT_PATTERNS,
    cancel_event=None,
    verbose: bool = False,
) -> RunResult:
    """Build the context document for *inputs* and stream it to *out_path*.

    When the preflight check asks for confirmation, *confirm* is called
    with the decision; without a callback, or if it returns ``False``, the
    run stops and no output file is created (``RunResult.declined``).
    ``out_path`` of ``"-"`` or ``None`` writes to stdout.
    """
    matcher = IgnoreMatcher.build(root, default_patterns=default_patterns, extra_patterns=extra_patterns)
    problems: List[Problem] = []

    if verbose:
        report(f"Expanding {len(inputs)} input(s) …")
    entries = expand(
        matcher.root,
        inputs,
        matcher=matcher,
        problems=problems,
        cancel_event=cancel_event,
        verbose=verbose,
    )

    resolved_out = None if out_path is None or str(out_path) == "-" else Path(out_path)
    if resolved_out is not None:
        # never read the file being written
        out_names = {os.path.abspath(resolved_out), os.path.realpath(resolved_out)}
        entries = [e for e in entries if e.absolute_path not in out_names]

    decision = (gate or PreflightGate()).evaluate(entries)
    if verbose:
        report(f"{decision.total_files} files, ~{decision.estimated_mb:.1f} MB")

    if decision.requires_confirmation and (confirm is None or not confirm(decision)):
        if verbose:
            report("Preflight not confirmed; nothing written.")
        return RunResult(entries=entries, decision=decision, declined=True, problems=problems)

    with open_sink(out_path) as sink:
        assembly = assemble(entries, sink, cancel_event=cancel_event, verbose=verbose)
    problems.extend(assembly.unreadable)

    if verbose:
        target = resolved_out if resolved_out is not None else "stdout"
        report(
            f"Done → {target}. {len(assembly.rendered)} rendered, "
            f"{len(assembly.binary)} binary, {len(assembly.unreadable)} unreadable, "
            f"{output_size(resolved_out)} bytes written.",
            Fore.GREEN,
        )

    return RunResult(
        entries=entries,
        decision=decision,
        assembly=assembly,
        problems=problems,
        out_path=resolved_out,
    )
