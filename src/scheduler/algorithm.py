"""Modified-Leitner scheduling for flashcard reviews.

Cards live in numbered buckets. Bucket ``i`` is reviewed on every day that is
a multiple of ``2 ** i``, so bucket 0 comes up daily and higher buckets come
up exponentially less often. A review outcome moves a card between buckets.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Set

from src.scheduler.models import (
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    BucketSets,
    Flashcard,
    ProgressStats,
    ReviewHistory,
)


LOGGER = logging.getLogger(__name__)


def to_bucket_sets(buckets: BucketMap) -> BucketSets:
    """Expand a sparse bucket mapping into a dense list indexed by bucket number.

    The result has ``max(key) + 1`` entries; indices missing from ``buckets``
    hold empty sets. The input mapping is not modified.
    """
    if not buckets:
        return []

    size = max(buckets) + 1
    return [set(buckets.get(index, ())) for index in range(size)]


def get_bucket_range(buckets: Sequence[Set[Flashcard]]) -> Optional[BucketRange]:
    """Return the span of occupied buckets, or ``None`` when no bucket holds cards."""
    min_bucket = next((index for index, bucket in enumerate(buckets) if bucket), None)
    if min_bucket is None:
        return None

    max_bucket = next(
        index for index in range(len(buckets) - 1, -1, -1) if buckets[index]
    )
    return BucketRange(min_bucket=min_bucket, max_bucket=max_bucket)


def practice(buckets: Sequence[Set[Flashcard]], day: int) -> Set[Flashcard]:
    """Return the cards due on ``day``."""
    if day < 0:
        raise ValueError(f"day must be non-negative, got {day}.")

    due: Set[Flashcard] = set()
    for index, bucket in enumerate(buckets):
        if bucket and day % (2 ** index) == 0:
            due.update(bucket)
    return due


def update(buckets: BucketMap, card: Flashcard, difficulty: AnswerDifficulty) -> BucketMap:
    """Move ``card`` to the bucket its review outcome earns.

    The mapping is edited in place and the same object is returned. A card
    that is not in any bucket leaves the mapping untouched.
    """
    current: Optional[int] = None
    for bucket_number, bucket in buckets.items():
        if card in bucket:
            current = bucket_number
            bucket.discard(card)
            break

    if current is None:
        LOGGER.debug("Card %r is not in any bucket; nothing to update.", card.front)
        return buckets

    if difficulty == AnswerDifficulty.WRONG:
        target = 0
    elif difficulty == AnswerDifficulty.EASY:
        target = current + 1
    elif difficulty == AnswerDifficulty.HARD and current > 0:
        target = current - 1
    else:
        target = current

    buckets.setdefault(target, set()).add(card)
    LOGGER.debug("Moved card %r from bucket %s to %s.", card.front, current, target)
    return buckets


def get_hint(card: Flashcard) -> str:
    """Return the card's hint, falling back to the first letter of the front."""
    if card.hint:
        return card.hint
    return card.front[:1]


def compute_progress(buckets: BucketMap, history: ReviewHistory) -> ProgressStats:
    """Summarise bucket spread and answer counts.

    The bucket span comes from the keys of ``buckets`` (an empty bucket still
    counts), unlike :func:`get_bucket_range`, which only looks at occupied
    buckets. Answers are only counted when both inputs are non-empty, and
    history entries that are not an :class:`AnswerDifficulty` are skipped.
    """
    if not buckets:
        return ProgressStats()

    min_bucket = min(buckets)
    max_bucket = max(buckets)
    if not history:
        return ProgressStats(min_bucket=min_bucket, max_bucket=max_bucket)

    counts = {difficulty: 0 for difficulty in AnswerDifficulty}
    for answers in history.values():
        for answer in answers:
            if answer in counts:
                counts[answer] += 1

    return ProgressStats(
        min_bucket=min_bucket,
        max_bucket=max_bucket,
        easy_count=counts[AnswerDifficulty.EASY],
        hard_count=counts[AnswerDifficulty.HARD],
        wrong_count=counts[AnswerDifficulty.WRONG],
    )
