"""Binary-content heuristic."""

SNIFF_BYTES = 8192


def is_binary(data: bytes) -> bool:
    """Return ``True`` if a NUL byte occurs in the first ``SNIFF_BYTES`` of *data*."""
    return b"\0" in data[:SNIFF_BYTES]
