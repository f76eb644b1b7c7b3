"""
Filter query data model for tagsearch.

This module defines the keyword query a tagset is evaluated against: the
good keywords it must satisfy, the bad keywords that veto it, and the
AND/OR and exact/fuzzy switches.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .tags import Tagset, tag_items


NEGATION_PREFIX = '!'


class FilterQuery(BaseModel):
    """
    An immutable keyword query over tagsets.

    Every segment of every tag, and the full joined path of nested tags, is
    compared with the keywords case-insensitively. A bad keyword match
    anywhere rejects the tagset outright. Otherwise the number of items
    matching a good keyword must reach the threshold fixed at construction:
    one in OR mode, the number of good keywords in AND mode.

    Attributes:
        good: Keywords a matching tagset must satisfy
        bad: Keywords whose presence rejects a tagset
        or_filter: Require ANY rather than ALL good keywords
        fuzzy: Match keywords as substrings instead of whole strings
    """

    model_config = ConfigDict(frozen=True)

    good: FrozenSet[str] = Field(default_factory=frozenset, description="Keywords to match")
    bad: FrozenSet[str] = Field(default_factory=frozenset, description="Keywords that veto a match")
    or_filter: bool = Field(False, description="Match ANY rather than ALL good keywords")
    fuzzy: bool = Field(False, description="Substring rather than exact comparison")

    _required_matches: int = PrivateAttr(0)
    _good_folded: Tuple[str, ...] = PrivateAttr(())
    _bad_folded: Tuple[str, ...] = PrivateAttr(())

    @field_validator('good', 'bad', mode='before')
    @classmethod
    def validate_keywords(cls, v: Any) -> FrozenSet[str]:
        """Accept any iterable of keywords, dropping blank entries."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(str(kw).strip() for kw in v if kw is not None and str(kw).strip())

    def model_post_init(self, __context) -> None:
        """Fix the match threshold and the case-folded keyword lists."""
        self._required_matches = 1 if self.or_filter else len(self.good)
        self._good_folded = tuple(sorted(kw.lower() for kw in self.good))
        self._bad_folded = tuple(sorted(kw.lower() for kw in self.bad))

    @classmethod
    def from_keywords(
        cls,
        keywords: Iterable[str],
        not_keywords: Iterable[str] = (),
        or_filter: bool = False,
        fuzzy: bool = False,
    ) -> 'FilterQuery':
        """
        Build a query from command-line style keywords.

        A keyword prefixed with ``!`` is treated as a bad keyword.

        Args:
            keywords: Keywords, optionally ``!``-prefixed
            not_keywords: Additional bad keywords
            or_filter: Require ANY rather than ALL good keywords
            fuzzy: Use substring matching

        Returns:
            FilterQuery for the given keywords
        """
        good: List[str] = []
        bad: List[str] = list(not_keywords)
        for kw in keywords:
            if kw.startswith(NEGATION_PREFIX):
                bad.append(kw[len(NEGATION_PREFIX):])
            else:
                good.append(kw)
        return cls(good=good, bad=bad, or_filter=or_filter, fuzzy=fuzzy)

    @property
    def required_matches(self) -> int:
        """Number of good matches a tagset needs."""
        return self._required_matches

    def _keyword_matches(self, keywords: Tuple[str, ...], candidate: str) -> bool:
        if self.fuzzy:
            return any(kw in candidate for kw in keywords)
        return candidate in keywords

    def matches(self, tagset: Tagset) -> bool:
        """
        Check whether a tagset satisfies this query.

        Args:
            tagset: Tags found in one file

        Returns:
            True if no bad keyword matches and enough good keywords do
        """
        num_matches = 0
        for tag in tagset:
            for item in tag_items(tag):
                candidate = item.lower()
                if self._keyword_matches(self._bad_folded, candidate):
                    return False
                if self._keyword_matches(self._good_folded, candidate):
                    num_matches += 1
        return num_matches >= self._required_matches

    def has_keywords(self) -> bool:
        """Check if the query names any good or bad keyword."""
        return bool(self.good or self.bad)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the query to a dictionary representation."""
        return {
            'good': sorted(self.good),
            'bad': sorted(self.bad),
            'or_filter': self.or_filter,
            'fuzzy': self.fuzzy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FilterQuery':
        """Create a FilterQuery instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Good: {', '.join(sorted(self.good)) or '-'}"]
        parts.append(f"Bad: {', '.join(sorted(self.bad)) or '-'}")
        parts.append("Mode: ANY" if self.or_filter else "Mode: ALL")
        if self.fuzzy:
            parts.append("Fuzzy")
        return " | ".join(parts)
