"""
OContext - turn a selection of files and folders into one LLM-ready prompt.

The pipeline expands the selection into a flat file list (honouring the
root ``.gitignore``), runs a size/count preflight check and then streams a
"project structure + file contents" document to a sink.
"""

__version__ = "0.1.0"

from .assemble import assemble, build_prompt, open_sink  # noqa: E402
from .binary import is_binary  # noqa: E402
from .core import (  # noqa: E402
    Cancelled,
    ConfigFileError,
    OContextError,
    OutputError,
    Problem,
    ProblemKind,
)
from .expand import FileEntry, expand  # noqa: E402
from .ignore import IgnoreMatcher  # noqa: E402
from .pipeline import RunResult, generate  # noqa: E402
from .preflight import PreflightDecision, PreflightGate  # noqa: E402

__all__ = [
    "__version__",
    "assemble",
    "build_prompt",
    "open_sink",
    "is_binary",
    "Cancelled",
    "ConfigFileError",
    "OContextError",
    "OutputError",
    "Problem",
    "ProblemKind",
    "FileEntry",
    "expand",
    "IgnoreMatcher",
    "RunResult",
    "generate",
    "PreflightDecision",
    "PreflightGate",
]
