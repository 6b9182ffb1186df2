"""Lazy member streams."""

from gzsplit.streams.stream import (
    MemberStream,
    MemberFileStream,
    save_member,
    DEFAULT_PATTERN,
)

__all__ = [
    "MemberStream",
    "MemberFileStream",
    "save_member",
    "DEFAULT_PATTERN",
]
