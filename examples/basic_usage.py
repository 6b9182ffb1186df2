#!/usr/bin/env python3
"""
Basic usage examples for gzsplit.
"""

import gzip
import io
import time
from gzsplit import (
    StreamScanner,
    MemberStream,
    ScannerConfig,
    GZIP_MARKER,
)


def make_concat_stream(n_members: int = 100, member_size: int = 64 * 1024) -> bytes:
    """Build a stream of marker-prefixed gzip payloads."""
    parts = []
    for i in range(n_members):
        payload = gzip.compress((f"record {i}\n" * (member_size // 12)).encode())
        parts.append(GZIP_MARKER + payload)
    return b"".join(parts)


def example_scanner(data: bytes):
    """Example: Pull members one at a time."""
    print("\n=== StreamScanner Example ===")

    scanner = StreamScanner(io.BytesIO(data), chunk_size=1024)
    start = time.time()
    while scanner.scan():
        if scanner.members_scanned <= 3:
            print(f"Member {scanner.members_scanned}: {len(scanner.member)} bytes")

    print(f"Status: {scanner.status.value}, error: {scanner.err}")
    print(f"Members: {scanner.members_scanned}, "
          f"scanned {ScannerConfig.get_instance().format_bytes(scanner.bytes_read)} "
          f"in {time.time() - start:.2f}s")


def example_member_stream(data: bytes):
    """Example: Member offsets from a lazy stream."""
    print("\n=== MemberStream Example ===")

    stream = MemberStream.from_source(io.BytesIO(data), chunk_size=4096)
    largest = max(((offset, len(member)) for offset, member in stream.enumerate_offsets()),
                  key=lambda pair: pair[1])
    print(f"Largest member at offset {largest[0]}: {largest[1]} bytes")


def example_configuration(data: bytes):
    """Example: Chunk sizing from configuration."""
    print("\n=== Configuration Example ===")

    ScannerConfig.set_defaults(chunk_strategy='memory_based')
    scanner = StreamScanner(io.BytesIO(data))
    print(f"Memory based chunk size: {scanner.chunk_size}")
    ScannerConfig.set_defaults(chunk_strategy='fixed')


def main():
    data = make_concat_stream()
    print(f"Stream size: {ScannerConfig.get_instance().format_bytes(len(data))}")

    example_scanner(data)
    example_member_stream(data)
    example_configuration(data)


if __name__ == "__main__":
    main()
