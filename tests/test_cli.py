#!/usr/bin/env python3
"""
Tests for the command line harness.
"""

import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock
from gzsplit import GZIP_MARKER
from gzsplit.cli import build_parser, main, run

MARKER = GZIP_MARKER


class FlakySource:
    def __init__(self, data):
        self._data = io.BytesIO(data)

    def readinto(self, buf):
        n = self._data.readinto(buf)
        if n == 0:
            raise OSError("broken pipe")
        return n


class TestCli(unittest.TestCase):
    """Test gzsplit command line behaviour."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "concat.gz")
        with open(self.path, 'wb') as f:
            f.write(MARKER + b"AAA" + MARKER + b"BB")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_lists_members(self):
        out = io.StringIO()
        with redirect_stdout(out):
            status = main([self.path, "--chunk-size", "3"])

        self.assertEqual(status, 0)
        self.assertEqual(out.getvalue(), "1 7\n2 6\n")

    def test_reads_stdin(self):
        stdin = io.TextIOWrapper(io.BytesIO(MARKER + b"one" + MARKER + b"three"))
        out = io.StringIO()
        with mock.patch("sys.stdin", stdin), redirect_stdout(out):
            status = main(["-", "--chunk-size", "5"])

        self.assertEqual(status, 0)
        self.assertEqual(out.getvalue(), "1 7\n2 9\n")

    def test_writes_members(self):
        out_dir = os.path.join(self.temp_dir, "members")
        with redirect_stdout(io.StringIO()):
            status = main([self.path, "--output-dir", out_dir, "--pattern", "{index}.bin"])

        self.assertEqual(status, 0)
        self.assertEqual(sorted(os.listdir(out_dir)), ["1.bin", "2.bin"])
        with open(os.path.join(out_dir, "2.bin"), 'rb') as f:
            self.assertEqual(f.read(), MARKER + b"BB")

    def test_failure_exit_status(self):
        args = build_parser().parse_args(["-", "--chunk-size", "4"])
        out = io.StringIO()
        status = run(FlakySource(MARKER + b"one" + MARKER + b"two"), args, out=out)

        self.assertEqual(status, 1)
        self.assertEqual(out.getvalue(), "1 7\n")

    def test_missing_file(self):
        self.assertEqual(main([os.path.join(self.temp_dir, "missing.gz")]), 1)

    def test_rejects_bad_chunk_size(self):
        self.assertEqual(main([self.path, "--chunk-size", "0"]), 2)


if __name__ == "__main__":
    unittest.main()
