"""
Incremental scanner splitting a concatenated stream into members.

Each member starts with a fixed marker (``00 00 1f 8b`` by default). The
source is read in fixed-size chunks and every byte is fed through a partial
match state machine, so a marker split across two reads is still found and
only the current member is ever held in memory.
"""

import os
import stat
import logging
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional

from gzsplit.config import ScannerConfig
from gzsplit.scanner.exceptions import (
    ScannerError,
    SourceReadError,
    ScannerBufferError,
    MemberTooLargeError,
)

logger = logging.getLogger(__name__)


class ScanStatus(Enum):
    """Lifecycle of a scanner."""
    SCANNING = "scanning"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def _prefix_table(marker: bytes) -> List[int]:
    """Length of the longest proper prefix of marker[:i + 1] that is also its suffix."""
    table = [0] * len(marker)
    k = 0
    for i in range(1, len(marker)):
        while k and marker[i] != marker[k]:
            k = table[k - 1]
        if marker[i] == marker[k]:
            k += 1
        table[i] = k
    return table


def _source_size(source: Any) -> Optional[int]:
    """Size of the source if it is a regular file, else None."""
    try:
        st = os.fstat(source.fileno())
    except (AttributeError, OSError, ValueError):
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st.st_size


class StreamScanner:
    """
    Iterate over the members of a concatenated byte stream, one at a time.

    Drive it with :meth:`scan`; after it returns True the member is available
    as :attr:`member`. When :meth:`scan` returns False, :attr:`status` tells a
    clean end of stream apart from a failure, and :attr:`err` holds the
    recorded failure. The scanner never closes its source.
    """

    def __init__(self,
                 source: Any,
                 chunk_size: Optional[int] = None,
                 marker: Optional[bytes] = None,
                 max_member_size: Optional[int] = None):
        """
        Initialize scanner.

        Args:
            source: Binary file-like object providing readinto() or read()
            chunk_size: Bytes per read (None to use the configured strategy)
            marker: Byte sequence that starts every member
            max_member_size: Largest member to buffer (None for configured limit)
        """
        cfg = ScannerConfig.get_instance()

        marker = cfg.marker if marker is None else bytes(marker)
        if not marker:
            raise ValueError("marker must not be empty")

        if chunk_size is None:
            chunk_size = cfg.calculate_chunk_size(_source_size(source))
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
            raise TypeError(f"chunk_size must be an int, not {type(chunk_size).__name__}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self._source = source
        self._readinto = self._bind_reader(source)
        self._marker = marker
        self._fallback = _prefix_table(marker)
        if max_member_size is None:
            max_member_size = cfg.member_limit
        if max_member_size < 1:
            raise ValueError(f"max_member_size must be positive, got {max_member_size}")
        self._max_member_size = max_member_size

        self._chunk = bytearray(chunk_size)   # scratch, overwritten by every read
        self._view = memoryview(self._chunk)
        self._member = bytearray()
        self._carry = bytearray()             # marker bytes opening the next member
        self._backlog: Optional[memoryview] = None  # unscanned rest of the last read
        self._held = bytearray()              # bytes of an unfinished partial match
        self._match = 0

        self._bytes_read = 0
        self._bytes_scanned = 0
        self._bytes_written = 0
        self._members_scanned = 0

        self._status = ScanStatus.SCANNING
        self._err: Optional[ScannerError] = None
        self._result: Optional[bytes] = None

    @staticmethod
    def _bind_reader(source: Any) -> Callable[[bytearray], Optional[int]]:
        if hasattr(source, 'readinto'):
            return source.readinto

        if hasattr(source, 'read'):
            def readinto(buf: bytearray) -> Optional[int]:
                data = source.read(len(buf))
                if data is None:
                    return None
                n = len(data)
                if n > len(buf):
                    raise ValueError(f"read() returned {n} bytes, asked for {len(buf)}")
                buf[:n] = data
                return n
            return readinto

        raise TypeError(f"source must provide readinto() or read(), got {type(source).__name__}")

    # Public API

    @property
    def chunk_size(self) -> int:
        return len(self._chunk)

    @property
    def marker(self) -> bytes:
        return self._marker

    @property
    def member(self) -> Optional[bytes]:
        """The member produced by the last successful :meth:`scan` call."""
        return self._result

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def has_more(self) -> bool:
        """True until the end of the stream or a failure has been recorded."""
        return self._status is ScanStatus.SCANNING

    @property
    def err(self) -> Optional[ScannerError]:
        """The failure that stopped the scanner, None on a clean end of stream."""
        return self._err

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    @property
    def bytes_written(self) -> int:
        """Total bytes appended to member buffers so far."""
        return self._bytes_written

    @property
    def members_scanned(self) -> int:
        return self._members_scanned

    def raise_for_error(self) -> None:
        """Raise the recorded failure, if any."""
        if self._err is not None:
            raise self._err

    def scan(self) -> bool:
        """
        Advance to the next member.

        Returns:
            True if a member is available through :attr:`member`, False once
            the stream is exhausted or the scanner failed.
        """
        if self._status is not ScanStatus.SCANNING:
            return False

        self._result = None
        try:
            return self._load_next_member()
        except ScannerError as e:
            self._fail(e)
            return False
        except MemoryError as e:
            error = ScannerBufferError(f"out of memory while scanning: {e!r}")
            error.__cause__ = e
            self._fail(error)
            return False

    def __iter__(self) -> Iterator[bytes]:
        """Yield the remaining members. The sequence cannot be restarted."""
        while self.scan():
            yield self._result

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(status={self._status.value}, "
                f"chunk_size={self.chunk_size}, members={self._members_scanned}, "
                f"bytes_read={self._bytes_read})")

    # Internals

    def _load_next_member(self) -> bool:
        self._begin_member()

        while True:
            view, self._backlog = self._backlog, None
            if view is None:
                n = self._read()
                if n == 0:
                    self._append(self._held)
                    self._held.clear()
                    self._status = ScanStatus.EXHAUSTED
                    logger.debug(f"End of stream after {self._bytes_read} bytes, "
                                 f"{self._members_scanned} members")
                    if self._member:
                        return self._publish()
                    return False
                view = self._view[:n]

            if self._feed(view):
                return self._publish()

    def _begin_member(self) -> None:
        """Seed a fresh member with the marker carried over from the last cut."""
        self._member = bytearray()
        self._append(self._carry)
        self._carry.clear()

    def _feed(self, view: memoryview) -> bool:
        """Run view through the matcher, True if a member boundary was found."""
        marker = self._marker
        size = len(marker)
        match = self._match

        # The leading marker of the first member is not a boundary.
        start = 1 if self._bytes_scanned == 0 else 0

        for j in range(start, len(view)):
            byte = view[j]
            # Fall back to the longest marker prefix still matching, not always 0.
            while match and byte != marker[match]:
                match = self._fallback[match - 1]
            if byte == marker[match]:
                match += 1
                if match == size:
                    self._match = 0
                    self._bytes_scanned += j + 1
                    self._cut(view, j + 1)
                    return True

        self._match = match
        self._bytes_scanned += len(view)

        # Everything but the partial match joins the member.
        pending = self._held + view
        keep = len(pending) - match
        self._append(pending[:keep])
        self._held = pending[keep:]
        return False

    def _cut(self, view: memoryview, end: int) -> None:
        """Split at a marker ending at view[end - 1]."""
        pending = self._held + view[:end]
        self._held = bytearray()
        cutoff = len(pending) - len(self._marker)
        self._append(pending[:cutoff])
        self._carry += pending[cutoff:]
        # Still inside the read buffer, valid until the next read.
        if end < len(view):
            self._backlog = view[end:]

    def _read(self) -> int:
        try:
            n = self._readinto(self._chunk)
        except Exception as e:
            raise SourceReadError(f"reading from source failed: {e}") from e
        if n is None:
            raise SourceReadError("source has no data available (non-blocking read)")
        self._bytes_read += n
        return n

    def _append(self, data) -> None:
        if not data:
            return
        size = len(self._member) + len(data)
        if size > self._max_member_size:
            raise MemberTooLargeError(size, self._max_member_size)
        try:
            self._member += data
        except MemoryError as e:
            raise ScannerBufferError(f"could not grow member buffer to {size} bytes") from e
        self._bytes_written += len(data)

    def _publish(self) -> bool:
        self._result = bytes(self._member)
        self._member = bytearray()
        self._members_scanned += 1
        logger.debug(f"Member {self._members_scanned}: {len(self._result)} bytes")
        return True

    def _fail(self, error: ScannerError) -> None:
        self._status = ScanStatus.FAILED
        self._err = error
        self._result = None
        self._member = bytearray()
        self._carry = bytearray()
        self._held = bytearray()
        self._backlog = None
        logger.error(f"Scanning failed after {self._bytes_read} bytes: {error}")


def iter_members(source: Any,
                 chunk_size: Optional[int] = None,
                 marker: Optional[bytes] = None,
                 strict: bool = True) -> Iterator[bytes]:
    """
    Yield every member of source.

    With ``strict`` a failure is raised once all members resolved before it
    have been yielded; otherwise iteration just stops.
    """
    scanner = StreamScanner(source, chunk_size=chunk_size, marker=marker)
    yield from scanner
    if strict:
        scanner.raise_for_error()
