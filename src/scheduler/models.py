"""Data model shared by the Leitner scheduling operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Hashable, Iterable, List, Mapping, Sequence, Set


class AnswerDifficulty(IntEnum):
    """Outcome of a single review trial."""

    WRONG = 0
    HARD = 1
    EASY = 2


@dataclass(frozen=True, slots=True, eq=False)
class Flashcard:
    """Immutable flashcard.

    Equality and hashing are by identity, so two cards with the same text are
    still distinct members of a bucket.
    """

    front: str
    back: str
    hint: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))


@dataclass(frozen=True, slots=True)
class BucketRange:
    """Lowest and highest bucket indices that hold at least one card."""

    min_bucket: int
    max_bucket: int


@dataclass(frozen=True, slots=True)
class ProgressStats:
    """Summary of bucket spread and recorded review outcomes."""

    min_bucket: int = 0
    max_bucket: int = 0
    easy_count: int = 0
    hard_count: int = 0
    wrong_count: int = 0

    @property
    def total_reviews(self) -> int:
        return self.easy_count + self.hard_count + self.wrong_count


BucketMap = Dict[int, Set[Flashcard]]
BucketSets = List[Set[Flashcard]]
ReviewHistory = Mapping[Hashable, Sequence[AnswerDifficulty]]


def make_tags(tags: Iterable[str]) -> frozenset[str]:
    """Normalise user-supplied tags, dropping blanks."""
    return frozenset(tag.strip() for tag in tags if tag and tag.strip())


__all__ = [
    "AnswerDifficulty",
    "BucketMap",
    "BucketRange",
    "BucketSets",
    "Flashcard",
    "ProgressStats",
    "ReviewHistory",
    "make_tags",
]
