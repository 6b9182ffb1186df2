"""Errors recorded by stream scanners."""


class ScannerError(Exception):
    """Base class for terminal scanner failures."""


class SourceReadError(ScannerError):
    """The underlying byte source failed while being read."""


class ScannerBufferError(ScannerError):
    """A member buffer could not be grown."""


class MemberTooLargeError(ScannerBufferError):
    """A member grew past the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"member of at least {size} bytes exceeds limit of {limit} bytes")
        self.size = size
        self.limit = limit
