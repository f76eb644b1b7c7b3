"""
Tag extraction for tagsearch.

This module turns file text into the set of hierarchical tags it contains.
A tag is an ``@`` sitting at the start of a line or right after whitespace,
followed by ASCII letters, digits, ``_``, ``-`` or ``/``. The token ends at
the first other character; it is then split on ``/`` into segments.

Two interchangeable extractors are provided: one built on a compiled
regular expression and one hand-written character scanner. They return the
same tagset for every input.
"""

import logging
import re
import string
from abc import ABC, abstractmethod
from typing import Iterator, List, Set

from ..errors import InvalidTagToken
from ..models.config import ExtractionStrategy
from ..models.tags import TAG_MARKER, Tag, Tagset, parse_tag


logger = logging.getLogger(__name__)

TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + '_-/')

TAG_PATTERN = r'(?<!\S)@+(?P<keyword>[A-Za-z0-9_\-/]+)'


class TagExtractor(ABC):
    """
    Base class for tag extractors.
    
    Subclasses only find the raw tokens; turning tokens into tags and
    discarding malformed ones is shared here. Instances hold no mutable
    state and can be shared between worker threads.
    """
    
    strategy: ExtractionStrategy
    
    @abstractmethod
    def tokens(self, text: str) -> Iterator[str]:
        """Yield every raw tag token (without the marker) found in text."""
    
    def extract(self, text: str) -> Tagset:
        """
        Extract the set of hierarchical tags from text.
        
        Args:
            text: Full text of a file
            
        Returns:
            Frozenset of tags, each a tuple of non-empty segments
        """
        tags: Set[Tag] = set()
        for token in self.tokens(text):
            try:
                tags.add(parse_tag(token))
            except InvalidTagToken as e:
                logger.debug(f"Discarding token: {e}")
        return frozenset(tags)
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class RegexTagExtractor(TagExtractor):
    """Extract tags with a single compiled regular expression."""
    
    strategy = ExtractionStrategy.REGEX
    
    def __init__(self, pattern: str = TAG_PATTERN):
        self._pattern = re.compile(pattern)
    
    @property
    def pattern(self) -> re.Pattern:
        return self._pattern
    
    def tokens(self, text: str) -> Iterator[str]:
        for match in self._pattern.finditer(text):
            yield match.group('keyword')


class ScanningTagExtractor(TagExtractor):
    """
    Extract tags with a single pass over each line.
    
    The scanner tracks whether the previous character was a boundary
    (start of line or whitespace), whether it is inside a run of markers
    that started on a boundary, and whether it is inside a token. A token
    is flushed on the first invalid character or at the end of the line.
    """
    
    strategy = ExtractionStrategy.SCANNER
    
    # scanner states
    _OUTSIDE = 0
    _BOUNDARY = 1
    _MARKER = 2
    _TOKEN = 3
    
    def tokens(self, text: str) -> Iterator[str]:
        for line in text.splitlines():
            yield from self._scan_line(line)
    
    def _scan_line(self, line: str) -> Iterator[str]:
        state = self._BOUNDARY
        token: List[str] = []
        
        for ch in line:
            if state == self._TOKEN:
                if ch in TOKEN_CHARS:
                    token.append(ch)
                    continue
                yield ''.join(token)
                token = []
                state = self._BOUNDARY if ch.isspace() else self._OUTSIDE
            elif state == self._MARKER:
                if ch == TAG_MARKER:
                    continue
                if ch in TOKEN_CHARS:
                    token.append(ch)
                    state = self._TOKEN
                else:
                    state = self._BOUNDARY if ch.isspace() else self._OUTSIDE
            elif ch == TAG_MARKER and state == self._BOUNDARY:
                state = self._MARKER
            else:
                state = self._BOUNDARY if ch.isspace() else self._OUTSIDE
        
        if state == self._TOKEN:
            yield ''.join(token)


def create_extractor(strategy: ExtractionStrategy = ExtractionStrategy.REGEX) -> TagExtractor:
    """
    Create the extractor for a strategy.
    
    Args:
        strategy: Extraction strategy (enum or its string value)
        
    Returns:
        A new TagExtractor instance
    """
    if isinstance(strategy, str):
        strategy = ExtractionStrategy(strategy.lower())
    
    if strategy == ExtractionStrategy.SCANNER:
        return ScanningTagExtractor()
    return RegexTagExtractor()


def extract_tags(text: str, strategy: ExtractionStrategy = ExtractionStrategy.REGEX) -> Tagset:
    """
    Convenience function to extract tags from text.
    
    Args:
        text: Text to scan
        strategy: Extraction strategy to use
        
    Returns:
        Frozenset of hierarchical tags
    """
    return create_extractor(strategy).extract(text)
