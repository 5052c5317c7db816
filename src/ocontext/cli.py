"""
CLI entrypoint for ocontext.
"""
import argparse
import sys
from pathlib import Path

from colorama import Fore, Style

from . import __version__
from .core import OContextError, report
from .ignore import load_extra_patterns
from .pipeline import generate
from .preflight import DEFAULT_MAX_BYTES, DEFAULT_MAX_FILES, PreflightDecision, PreflightGate

DEFAULT_OUT = ".ocontext/context.txt"


def _error(msg: str) -> None:
    print(Fore.RED + f"Error: {msg}" + Style.RESET_ALL, file=sys.stderr)


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ocontext",
        description="Bundle files and folders into a single LLM prompt (structure + contents).",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Files or folders to include (default: the root)")
    p.add_argument("--root", type=Path, default=Path("."), help="Project root dir (default: cwd)")
    p.add_argument(
        "--out",
        help=f"Output file, or '-' for stdout (default: <root>/{DEFAULT_OUT})",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument(
        "--max-files",
        type=int,
        default=DEFAULT_MAX_FILES,
        help=f"Ask before including more files than this (default {DEFAULT_MAX_FILES})",
    )
    p.add_argument(
        "--max-total-bytes",
        type=int,
        default=DEFAULT_MAX_BYTES,
        help="Ask before including more bytes than this (default 10 MiB)",
    )
    p.add_argument("-y", "--yes", action="store_true", help="Don't ask, always continue")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _ask(decision: PreflightDecision) -> bool:
    # stdout may be the document itself
    print(f"{decision.prompt()} [y/N] ", end="", file=sys.stderr, flush=True)
    answer = sys.stdin.readline()
    return answer.strip().lower() in ("y", "yes")


def main(argv=None) -> int:
    try:
        ns = _parse_args(argv)
        root = ns.root.absolute()
        if not root.is_dir():
            if ns.verbose:
                report(f"Root '{ns.root}' is not a directory; using absolute paths", Fore.YELLOW)
            root = None

        extra_patterns = []
        if ns.config:
            extra_patterns = load_extra_patterns(ns.config.resolve())
            if ns.verbose:
                report(f"Loaded {len(extra_patterns)} extra patterns from {ns.config}")

        inputs = ns.paths or ([root] if root is not None else [])
        if not inputs:
            _error("No files or folders selected.")
            return 1

        result = generate(
            inputs,
            out_path=ns.out if ns.out is not None else (root or Path.cwd()) / DEFAULT_OUT,
            root=root,
            confirm=(lambda decision: True) if ns.yes else _ask,
            gate=PreflightGate(max_files=ns.max_files, max_bytes=ns.max_total_bytes),
            extra_patterns=extra_patterns,
            verbose=ns.verbose,
        )
        if result.declined:
            return 0

        if not ns.verbose:
            for problem in result.problems:
                print(f"Warning: {problem}", file=sys.stderr)
        return 0

    except OContextError as e:
        _error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
