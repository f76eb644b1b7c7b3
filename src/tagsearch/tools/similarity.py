"""
Near-duplicate tag detection.

Finds tag segments that probably mean the same thing: the same word in a
different case, or a word and its plural.
"""

import logging
from typing import Iterable, List, Optional

from ..models.results import Issue
from ..models.tags import Tag, sorted_tags


logger = logging.getLogger(__name__)


def compare_segments(first: str, second: str) -> Optional[Issue]:
    """
    Classify two differing segments.
    
    Args:
        first: Segment from the smaller tag
        second: Segment from the larger tag
        
    Returns:
        A CASE or PLURAL issue, or None if the segments look unrelated
    """
    if first == second:
        return None
    
    if first.lower() == second.lower():
        return Issue.case(first, second)
    
    longer, shorter = (first, second) if len(first) > len(second) else (second, first)
    if len(longer) == len(shorter) + 1 and longer.endswith('s') and longer[:-1] == shorter:
        return Issue.plural(first, second)
    
    return None


def compare_tags(first: Tag, second: Tag) -> Optional[Issue]:
    """Compare two tags at their first differing segment only."""
    for segment_a, segment_b in zip(first, second):
        if segment_a != segment_b:
            return compare_segments(segment_a, segment_b)
    return None


def similar_tags(vocabulary: Iterable[Tag]) -> List[Issue]:
    """
    Find likely-duplicate tags in a vocabulary.
    
    Every unordered pair of distinct tags is compared once, with the
    lexicographically smaller tag first, so each issue is reported in one
    direction only.
    
    Args:
        vocabulary: All tags in use
        
    Returns:
        Distinct issues, in the order they were found
    """
    tags = sorted_tags(vocabulary)
    issues: List[Issue] = []
    seen = set()
    
    for i, first in enumerate(tags):
        for second in tags[i + 1:]:
            issue = compare_tags(first, second)
            if issue is not None and issue not in seen:
                seen.add(issue)
                issues.append(issue)
    
    logger.debug(f"Compared {len(tags)} tags, found {len(issues)} similar pairs")
    return issues
