"""
tagsearch - Core Package

Search, filter and summarise plaintext files by the inline hierarchical
tags (``@work/projectA``) written inside them.
"""

from .errors import (
    TagsearchError,
    FileUnreadable,
    InvalidTagToken,
    OutputTerminated,
    FileDiscoveryError,
)
from .models.tags import Tag, Tagset, tag_to_str
from .models.filter_query import FilterQuery
from .models.results import Issue, IssueKind
from .tools.tag_extractor import ExtractionStrategy, extract_tags
from .tools.tag_filter import Filter, build_filter
from .tools.similarity import similar_tags
from .tools.tree import render_tree

__version__ = "0.9.1"
__author__ = "tagsearch developers"

__all__ = [
    'TagsearchError',
    'FileUnreadable',
    'InvalidTagToken',
    'OutputTerminated',
    'FileDiscoveryError',
    'Tag',
    'Tagset',
    'tag_to_str',
    'FilterQuery',
    'Issue',
    'IssueKind',
    'ExtractionStrategy',
    'extract_tags',
    'Filter',
    'build_filter',
    'similar_tags',
    'render_tree',
]
