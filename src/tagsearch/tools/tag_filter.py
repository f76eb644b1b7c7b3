"""
File filtering and tag aggregation for tagsearch.

The Filter applies a FilterQuery to the tagsets of a list of files, and
aggregates those tagsets into tag unions, usage counts and similarity
reports.
"""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union
from pathlib import Path

from ..models.config import TagsearchConfig
from ..models.filter_query import FilterQuery
from ..models.results import Issue
from ..models.tags import Tag, Tagset, tag_items
from .similarity import similar_tags
from .tag_scanner import ScanResult, TagScanner


logger = logging.getLogger(__name__)

FileList = Sequence[Union[str, Path]]


class Filter:
    """
    Applies a keyword query to files.
    
    A Filter is built once per query and is read-only afterwards. Every
    file-level operation reads the files through its TagScanner, which skips
    and reports unreadable files.
    """
    
    def __init__(self, query: FilterQuery, scanner: Optional[TagScanner] = None):
        """
        Initialize the filter.
        
        Args:
            query: Keyword query to apply
            scanner: Scanner used to read files (default scanner if None)
        """
        self.query = query
        self.scanner = scanner or TagScanner()
    
    @classmethod
    def from_config(cls, query: FilterQuery, config: TagsearchConfig) -> 'Filter':
        """Create a filter whose scanner follows the given configuration."""
        return cls(query, TagScanner.from_config(config))
    
    def matches(self, tagset: Tagset) -> bool:
        """Check whether a single tagset matches the query."""
        return self.query.matches(tagset)
    
    def scan(self, files: FileList) -> ScanResult:
        """Read and extract the tagsets of files."""
        return self.scanner.scan(files)
    
    def _tagsets(self, files: Union[FileList, ScanResult]) -> List[Tuple[str, Tagset]]:
        if isinstance(files, ScanResult):
            return list(files.tagsets.items())
        
        result = self.scan(files)
        return [
            (str(f), result.tagsets[str(f)])
            for f in files
            if str(f) in result.tagsets
        ]
    
    def files_matching(self, files: Union[FileList, ScanResult]) -> List[str]:
        """
        Get the files whose tagset matches the query.
        
        Args:
            files: Files to check, or an existing scan of them
            
        Returns:
            Matching files, in input order
        """
        return [path for path, tags in self._tagsets(files) if self.matches(tags)]
    
    def tags_matching(self, files: Union[FileList, ScanResult]) -> Set[Tag]:
        """
        Get every tag used by a file that matches the query.
        
        Args:
            files: Files to check, or an existing scan of them
            
        Returns:
            Union of the matching files' tags
        """
        tags: Set[Tag] = set()
        for _, tagset in self._tagsets(files):
            if self.matches(tagset):
                tags |= tagset
        return tags
    
    def untagged(self, files: Union[FileList, ScanResult]) -> List[str]:
        """Get the files that contain no tags, in input order."""
        return [path for path, tags in self._tagsets(files) if not tags]
    
    def all_tags(self, files: Union[FileList, ScanResult]) -> Set[Tag]:
        """Get the union of all files' tags, ignoring the query."""
        tags: Set[Tag] = set()
        for _, tagset in self._tagsets(files):
            tags |= tagset
        return tags
    
    def similar_tags(self, files: Union[FileList, ScanResult]) -> List[Issue]:
        """
        Find likely-duplicate tags across all files.
        
        The whole vocabulary is analysed regardless of the query.
        """
        return similar_tags(self.all_tags(files))
    
    def count_of_tags(self, files: Union[FileList, ScanResult]) -> List[Tuple[int, str]]:
        """
        Count tag usage across all files, ignoring the query.
        
        Each segment of a tag is counted, and nested tags also count their
        full joined path.
        
        Args:
            files: Files to count, or an existing scan of them
            
        Returns:
            (count, key) pairs, most used first, ties in key order
        """
        counts = count_tagsets(tagset for _, tagset in self._tagsets(files))
        return sorted(((count, key) for key, count in counts.items()), key=lambda pair: (-pair[0], pair[1]))


def count_tagsets(tagsets: Iterable[Tagset]) -> Counter:
    """Fold tagsets into a Counter keyed by segment and joined path."""
    counts: Counter = Counter()
    for tagset in tagsets:
        for tag in tagset:
            counts.update(tag_items(tag))
    return counts


def build_filter(
    good: Iterable[str] = (),
    bad: Iterable[str] = (),
    or_mode: bool = False,
    fuzzy: bool = False,
    scanner: Optional[TagScanner] = None,
) -> Filter:
    """
    Convenience function to build a Filter.
    
    Args:
        good: Keywords a matching tagset must satisfy
        bad: Keywords that veto a match
        or_mode: Require ANY rather than ALL good keywords
        fuzzy: Use substring matching
        scanner: Scanner used to read files
        
    Returns:
        Filter for the query
    """
    query = FilterQuery(good=list(good), bad=list(bad), or_filter=or_mode, fuzzy=fuzzy)
    return Filter(query, scanner)
