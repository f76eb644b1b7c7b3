"""
Exception types shared across tagsearch.

Per-file problems (``FileUnreadable``) are collected and reported without
stopping a run; ``FileDiscoveryError`` means there is no file list to work
on at all.
"""

from pathlib import Path
from typing import Union


class TagsearchError(Exception):
    """Base class for all tagsearch errors."""
    pass


class FileUnreadable(TagsearchError):
    """Raised when a single file cannot be opened, read or decoded."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Couldn't read file `{self.path}`: {reason}")


class InvalidTagToken(TagsearchError):
    """Raised when a scanned token has no non-empty segment (e.g. ``@/``)."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid tag token: {token!r}")


class OutputTerminated(TagsearchError):
    """Raised when the consumer of our output closed its end early."""
    pass


class FileDiscoveryError(TagsearchError):
    """Raised when the list of candidate files cannot be enumerated."""
    pass
