"""
Command line entry point: list or extract the members of a concatenated stream.
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from gzsplit.config import ScannerConfig
from gzsplit.scanner import ScannerError
from gzsplit.streams import MemberStream, save_member, DEFAULT_PATTERN

logger = logging.getLogger("gzsplit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gzsplit",
        description="Split a stream of concatenated gzip files into its members.",
    )
    parser.add_argument("target", help="input file, or - for stdin")
    parser.add_argument("--chunk-size", type=int, default=None,
                        help="bytes per read (default: configured strategy)")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="write every member to its own file in this directory")
    parser.add_argument("--pattern", default=DEFAULT_PATTERN,
                        help="file name pattern for --output-dir")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def run(source, args: argparse.Namespace, out=None) -> int:
    """Scan source, report every member and return the exit status."""
    out = out or sys.stdout

    if args.output_dir is not None:
        args.output_dir.mkdir(parents=True, exist_ok=True)

    stream = MemberStream.from_source(source, chunk_size=args.chunk_size)
    members = 0
    scanned = 0
    try:
        for offset, member in stream.enumerate_offsets():
            members += 1
            scanned = offset + len(member)
            print(members, len(member), file=out)
            if args.output_dir is not None:
                save_member(args.output_dir, members, member, args.pattern)
    except ScannerError as e:
        logger.error(f"scanning failed: {e}")
        return 1

    cfg = ScannerConfig.get_instance()
    logger.info(f"{members} members, {cfg.format_bytes(scanned)} scanned")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.chunk_size is not None and args.chunk_size < 1:
        logger.error("--chunk-size must be positive")
        return 2

    if args.target == "-":
        return run(sys.stdin.buffer, args)

    try:
        f = open(args.target, 'rb')
    except OSError as e:
        logger.error(f"cannot open {args.target}: {e}")
        return 1

    with f:
        return run(f, args)


if __name__ == "__main__":
    sys.exit(main())
