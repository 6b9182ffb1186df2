#!/usr/bin/env python3
"""
Tests for scanner configuration and chunk sizing.
"""

import io
import os
import shutil
import tempfile
import unittest
import psutil
from gzsplit import ScannerConfig, ChunkStrategy, StreamScanner, GZIP_MARKER

SAVED_OPTIONS = (
    'chunk_strategy', 'fixed_chunk_size', 'min_chunk_size',
    'max_chunk_size', 'memory_limit', 'max_member_size', 'marker',
)


class TestScannerConfig(unittest.TestCase):
    """Test configuration defaults and strategies."""

    def setUp(self):
        """Remember the global configuration."""
        self.config = ScannerConfig.get_instance()
        self.saved = {key: getattr(self.config, key) for key in SAVED_OPTIONS}
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Restore the global configuration."""
        ScannerConfig.set_defaults(**self.saved)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_defaults(self):
        config = ScannerConfig()
        self.assertEqual(config.chunk_strategy, ChunkStrategy.FIXED)
        self.assertEqual(config.calculate_chunk_size(), 1024)
        self.assertEqual(config.marker, b"\x00\x00\x1f\x8b")
        self.assertLessEqual(config.memory_limit, psutil.virtual_memory().total)
        self.assertEqual(config.member_limit, config.memory_limit)

    def test_singleton(self):
        self.assertIs(ScannerConfig.get_instance(), ScannerConfig.get_instance())

    def test_set_defaults_accepts_strategy_names(self):
        ScannerConfig.set_defaults(chunk_strategy='sqrt_n')
        self.assertEqual(self.config.chunk_strategy, ChunkStrategy.SQRT_N)

    def test_set_defaults_rejects_unknown_option(self):
        with self.assertRaises(AttributeError):
            ScannerConfig.set_defaults(storage_path="/tmp")
        with self.assertRaises(ValueError):
            ScannerConfig.set_defaults(chunk_strategy='bogus')

    def test_sqrt_n_strategy(self):
        config = ScannerConfig(chunk_strategy=ChunkStrategy.SQRT_N)
        self.assertEqual(config.calculate_chunk_size(1_000_000), 1000)
        self.assertEqual(config.calculate_chunk_size(100), config.min_chunk_size)
        self.assertEqual(config.calculate_chunk_size(None), config.fixed_chunk_size)

    def test_memory_based_strategy(self):
        config = ScannerConfig(chunk_strategy=ChunkStrategy.MEMORY_BASED)
        size = config.calculate_chunk_size()
        self.assertGreaterEqual(size, config.min_chunk_size)
        self.assertLessEqual(size, config.max_chunk_size)
        # Never larger than the source itself.
        self.assertEqual(config.calculate_chunk_size(100), 100)

    def test_member_limit(self):
        config = ScannerConfig(max_member_size=4096)
        self.assertEqual(config.member_limit, 4096)

    def test_format_bytes(self):
        self.assertEqual(self.config.format_bytes(512), "512.00 B")
        self.assertEqual(self.config.format_bytes(1536), "1.50 KB")
        self.assertEqual(self.config.format_bytes(3 * 1024 ** 3), "3.00 GB")

    def test_scanner_uses_configured_chunk_size(self):
        ScannerConfig.set_defaults(fixed_chunk_size=7)
        scanner = StreamScanner(io.BytesIO(b""))
        self.assertEqual(scanner.chunk_size, 7)

    def test_scanner_sizes_chunks_from_file(self):
        """sqrt_n chunking uses the size of a regular file."""
        path = os.path.join(self.temp_dir, "data.bin")
        with open(path, 'wb') as f:
            f.write(GZIP_MARKER + b"x" * (10_000 - len(GZIP_MARKER)))

        ScannerConfig.set_defaults(chunk_strategy='sqrt_n')
        with open(path, 'rb') as f:
            scanner = StreamScanner(f)
            self.assertEqual(scanner.chunk_size, 100)
            self.assertEqual(len(list(scanner)), 1)

        # No size to go on for in-memory sources.
        scanner = StreamScanner(io.BytesIO(b"abc"))
        self.assertEqual(scanner.chunk_size, self.config.fixed_chunk_size)

    def test_scanner_uses_configured_marker(self):
        ScannerConfig.set_defaults(marker=b"||")
        scanner = StreamScanner(io.BytesIO(b"||a||b"), chunk_size=2)
        self.assertEqual(list(scanner), [b"||a", b"||b"])

    def test_scanner_uses_configured_member_limit(self):
        ScannerConfig.set_defaults(max_member_size=16)
        scanner = StreamScanner(io.BytesIO(GZIP_MARKER + b"x" * 64), chunk_size=8)
        self.assertFalse(scanner.scan())
        self.assertIsNotNone(scanner.err)


if __name__ == "__main__":
    unittest.main()
