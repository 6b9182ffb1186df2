"""
gzsplit: split concatenated gzip streams into their members.

Streams produced by naively concatenating many gzip payloads, each prefixed
by the ``00 00 1f 8b`` marker, are scanned chunk by chunk so that only one
member is held in memory at a time.
"""

from gzsplit.config import ScannerConfig, ChunkStrategy, GZIP_MARKER
from gzsplit.scanner import (
    StreamScanner,
    ScanStatus,
    iter_members,
    ScannerError,
    SourceReadError,
    ScannerBufferError,
    MemberTooLargeError,
)
from gzsplit.streams import MemberStream

__version__ = "0.1.0"
__license__ = "Apache-2.0"

__all__ = [
    "ScannerConfig",
    "ChunkStrategy",
    "GZIP_MARKER",
    "StreamScanner",
    "ScanStatus",
    "iter_members",
    "ScannerError",
    "SourceReadError",
    "ScannerBufferError",
    "MemberTooLargeError",
    "MemberStream",
]
