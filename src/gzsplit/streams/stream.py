"""
Lazy streams over the members of concatenated byte streams.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Tuple, Union

from gzsplit.scanner import StreamScanner

DEFAULT_PATTERN = "member-{index:06d}.gz"

logger = logging.getLogger(__name__)


def save_member(directory: Union[str, Path], index: int, member: bytes,
                pattern: str = DEFAULT_PATTERN) -> Path:
    """Write one member to directory, named by pattern with its 1-based index."""
    target = Path(directory) / pattern.format(index=index)
    with open(target, 'wb') as f:
        f.write(member)
    return target


class MemberStream:
    """
    Members of a concatenated stream, scanned only while iterated.

    Iteration is strict: a failure recorded by the underlying scanner is
    raised after every member resolved before it has been yielded.
    """

    def __init__(self, scan: Callable[[], Iterator[bytes]]):
        """
        Initialize stream.

        Args:
            scan: Callable starting a scan and returning an iterator over members
        """
        if not callable(scan):
            raise TypeError("scan must be callable")
        self._scan = scan

    def __iter__(self) -> Iterator[bytes]:
        return self._scan()

    def enumerate_offsets(self) -> Iterator[Tuple[int, bytes]]:
        """Yield (offset, member) pairs, offset being the member's position in the source."""
        offset = 0
        for member in self:
            yield offset, member
            offset += len(member)

    def total_bytes(self) -> int:
        """Size of the source covered by complete members."""
        return sum(len(member) for member in self)

    def to_directory(self, path: Union[str, Path], pattern: str = DEFAULT_PATTERN) -> List[Path]:
        """
        Write each member to its own file.

        Args:
            path: Output directory, created if missing
            pattern: File name format, receives ``index`` (1-based)

        Returns:
            Paths of the written files, in stream order
        """
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

        written = [save_member(path, index, member, pattern)
                   for index, member in enumerate(self, start=1)]

        logger.info(f"Wrote {len(written)} members to {path}")
        return written

    # Factory methods

    @classmethod
    def from_source(cls,
                    source: BinaryIO,
                    chunk_size: Optional[int] = None,
                    marker: Optional[bytes] = None) -> 'MemberStream':
        """
        Create stream over an open binary source.

        The source can only be consumed once, so the stream is single pass.
        """
        scanner = StreamScanner(source, chunk_size=chunk_size, marker=marker)

        def scan():
            yield from scanner
            scanner.raise_for_error()

        return cls(scan)

    @classmethod
    def from_file(cls,
                  path: Union[str, Path],
                  chunk_size: Optional[int] = None,
                  marker: Optional[bytes] = None) -> 'MemberStream':
        """Create stream from file, rescanned from the start on every iteration."""
        return MemberFileStream(path, chunk_size=chunk_size, marker=marker)


class MemberFileStream(MemberStream):
    """Stream members from a file on disk."""

    def __init__(self,
                 path: Union[str, Path],
                 chunk_size: Optional[int] = None,
                 marker: Optional[bytes] = None):
        self.path = Path(path)
        self.chunk_size = chunk_size
        self.marker = marker

        def scan():
            with open(self.path, 'rb') as f:
                scanner = StreamScanner(f, chunk_size=self.chunk_size, marker=self.marker)
                yield from scanner
                scanner.raise_for_error()

        super().__init__(scan)
