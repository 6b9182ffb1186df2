"""Streaming member scanner for concatenated byte streams."""

from gzsplit.scanner.scanner import (
    StreamScanner,
    ScanStatus,
    iter_members,
)
from gzsplit.scanner.exceptions import (
    ScannerError,
    SourceReadError,
    ScannerBufferError,
    MemberTooLargeError,
)

__all__ = [
    "StreamScanner",
    "ScanStatus",
    "iter_members",
    "ScannerError",
    "SourceReadError",
    "ScannerBufferError",
    "MemberTooLargeError",
]
