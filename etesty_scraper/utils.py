"""Utility helpers for file naming and console progress."""

from __future__ import annotations

import sys
from typing import TextIO

CLEAR_LINE = "\x1b[0K"


def file_safe_name(value: str, limit: int) -> str:
    """Truncate a display name and replace path separators with hyphens."""
    return value[:limit].replace("/", "-")


def local_ref(*parts: str) -> str:
    """Build the ``./``-prefixed reference stored in CSV media cells."""
    return "./" + "/".join(parts)


def progress(message: str, stream: TextIO | None = None) -> None:
    """Overwrite the current console line with a progress message."""
    stream = stream or sys.stdout
    stream.write(f"\r{message} {CLEAR_LINE}")
    stream.flush()
