"""Exceptions raised by the filter orchestration layer."""

from __future__ import annotations


class FilterServiceError(Exception):
    """Base class for filter service errors."""
    pass


class FilterNotFoundError(FilterServiceError):
    """Raised when a filter id is not known to the store."""

    def __init__(self, filter_id: str):
        self.filter_id = filter_id
        super().__init__(f"Filter not found: {filter_id}")


class FilterFileError(FilterServiceError):
    """Raised when a filter file cannot be registered (unreadable or wrong type)."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"Cannot read filter file: {file_path}")
