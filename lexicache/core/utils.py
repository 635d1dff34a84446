"""
Shared utility functions.
"""

from __future__ import annotations

from typing import Callable


Clock = Callable[[], float]


def to_millis(seconds: float) -> int:
    """Convert a clock reading in seconds to integer milliseconds."""
    return int(seconds * 1000)


def truncate(value: str | None, limit: int) -> str:
    """Return ``value`` cut to ``limit`` characters; ``None`` becomes empty."""
    return (value or "")[:limit]
