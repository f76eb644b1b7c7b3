"""
Data models for tagsearch.

This module contains the core data structures used throughout the system.
"""

from .config import TagsearchConfig, ExtractionStrategy
from .filter_query import FilterQuery
from .results import Issue, IssueKind
from .tags import Tag, Tagset, parse_tag, tag_to_str

__all__ = [
    'TagsearchConfig',
    'ExtractionStrategy',
    'FilterQuery',
    'Issue',
    'IssueKind',
    'Tag',
    'Tagset',
    'parse_tag',
    'tag_to_str',
]
