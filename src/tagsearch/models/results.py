"""
Result data models for tagsearch.

This module defines the values reported back from analysis passes, such as
the near-duplicate tag issues found by the similarity analyzer.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class IssueKind(Enum):
    """Kinds of near-duplicate tag segments."""
    CASE = "CASE"
    PLURAL = "PLURAL"


class Issue(BaseModel):
    """
    A pair of tag segments that probably mean the same thing.

    Attributes:
        kind: Whether the segments differ by case or by a trailing 's'
        first: Segment from the lexicographically smaller tag
        second: Segment from the larger tag
    """

    model_config = ConfigDict(frozen=True)

    kind: IssueKind = Field(..., description="Kind of similarity detected")
    first: str = Field(..., min_length=1, description="Segment from the smaller tag")
    second: str = Field(..., min_length=1, description="Segment from the larger tag")

    @classmethod
    def case(cls, first: str, second: str) -> 'Issue':
        return cls(kind=IssueKind.CASE, first=first, second=second)

    @classmethod
    def plural(cls, first: str, second: str) -> 'Issue':
        return cls(kind=IssueKind.PLURAL, first=first, second=second)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the issue to a dictionary representation."""
        data = self.model_dump()
        data['kind'] = self.kind.value
        return data

    def __str__(self) -> str:
        return f"{self.kind.value} - {self.first} & {self.second}"
