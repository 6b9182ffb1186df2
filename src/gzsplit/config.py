"""
Configuration management for member scanning.
"""

import math
from typing import Optional, Union
from dataclasses import dataclass, field
from enum import Enum
import psutil


# Every member of a concatenated gzip stream starts with these bytes.
GZIP_MARKER = b"\x00\x00\x1f\x8b"


class ChunkStrategy(Enum):
    """Strategy for determining read chunk sizes."""
    FIXED = "fixed"
    SQRT_N = "sqrt_n"
    MEMORY_BASED = "memory_based"


@dataclass
class ScannerConfig:
    """Global configuration for stream scanners."""

    # Chunking
    chunk_strategy: ChunkStrategy = ChunkStrategy.FIXED
    fixed_chunk_size: int = 1024
    min_chunk_size: int = 64
    max_chunk_size: int = 16 * 1024 * 1024

    # Memory limits
    memory_limit: int = field(default_factory=lambda: int(psutil.virtual_memory().total * 0.8))
    max_member_size: Optional[int] = None  # None: bounded by memory_limit

    # Framing
    marker: bytes = GZIP_MARKER

    _instance: Optional['ScannerConfig'] = None

    @classmethod
    def get_instance(cls) -> 'ScannerConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_defaults(cls, **kwargs) -> None:
        """Set default configuration values."""
        instance = cls.get_instance()
        for key, value in kwargs.items():
            if not hasattr(instance, key):
                raise AttributeError(f"unknown configuration option: {key}")
            if key == 'chunk_strategy':
                value = ChunkStrategy(value)
            setattr(instance, key, value)

    @property
    def member_limit(self) -> int:
        """Largest member a scanner may buffer."""
        if self.max_member_size is not None:
            return self.max_member_size
        return self.memory_limit

    def calculate_chunk_size(self, total_size: Optional[int] = None) -> int:
        """Calculate read chunk size based on strategy.

        ``total_size`` is the size of the source when known (a regular file),
        strategies that need it fall back to the fixed size otherwise.
        """
        if self.chunk_strategy == ChunkStrategy.FIXED:
            return self.fixed_chunk_size

        elif self.chunk_strategy == ChunkStrategy.SQRT_N:
            if not total_size:
                return self.fixed_chunk_size
            sqrt_n = int(math.sqrt(total_size))
            return max(self.min_chunk_size, min(sqrt_n, self.max_chunk_size))

        elif self.chunk_strategy == ChunkStrategy.MEMORY_BASED:
            available = psutil.virtual_memory().available
            # 1% of available memory per read
            chunk_size = int(available * 0.01)
            if total_size:
                chunk_size = min(chunk_size, total_size)
            return max(self.min_chunk_size, min(chunk_size, self.max_chunk_size))

        return self.fixed_chunk_size

    def format_bytes(self, bytes: Union[int, float]) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes < 1024.0:
                return f"{bytes:.2f} {unit}"
            bytes /= 1024.0
        return f"{bytes:.2f} PB"


# Global configuration instance
config = ScannerConfig.get_instance()
