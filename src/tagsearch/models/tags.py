"""
Hierarchical tag types for tagsearch.

A tag is a tuple of string segments, so equality, hashing and the
lexicographic ordering used for display all come from ``tuple``.
"""

from typing import FrozenSet, Iterable, List, Tuple

from ..errors import InvalidTagToken


Tag = Tuple[str, ...]
Tagset = FrozenSet[Tag]

TAG_MARKER = '@'
SEGMENT_SEPARATOR = '/'


def parse_tag(token: str) -> Tag:
    """
    Split a scanned token into a hierarchical tag.

    A leading marker is stripped and empty segments are dropped, so
    ``@a//b`` and ``a/b/`` both give ``('a', 'b')``.

    Args:
        token: Token text, with or without the leading ``@``

    Returns:
        Tuple of non-empty segments

    Raises:
        InvalidTagToken: If no non-empty segment remains
    """
    segments = tuple(
        segment for segment in token.lstrip(TAG_MARKER).split(SEGMENT_SEPARATOR)
        if segment
    )
    if not segments:
        raise InvalidTagToken(token)
    return segments


def tag_to_str(tag: Tag) -> str:
    """Join a tag back into its ``a/b/c`` form."""
    return SEGMENT_SEPARATOR.join(tag)


def tag_items(tag: Tag) -> List[str]:
    """
    Get the strings a tag is matched and counted by.

    Every segment, plus the full joined path when the tag is nested.
    """
    items = list(tag)
    if len(tag) > 1:
        items.append(tag_to_str(tag))
    return items


def sorted_tags(tags: Iterable[Tag]) -> List[Tag]:
    """Deduplicate and sort tags into display order."""
    return sorted(set(tags))
