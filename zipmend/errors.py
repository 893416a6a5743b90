"""Failures that end an analyze/process operation. Nothing partial is returned."""
from __future__ import annotations


class ZipMendError(ValueError):
    """Base class; callers catch this one type."""


class MalformedArchiveError(ZipMendError):
    def __init__(self, message: str = "Invalid ZIP file format"):
        super().__init__(message)


class EntryReadError(ZipMendError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path!r}: {reason}")


class ArchiveTooLargeError(ZipMendError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ZIP file too large ({size} bytes, max {limit})")
