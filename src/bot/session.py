"""In-memory review session that drives the Leitner scheduler for one learner."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Set

from src.scheduler import (
    AnswerDifficulty,
    BucketRange,
    Flashcard,
    ProgressStats,
    compute_progress,
    get_bucket_range,
    get_hint,
    practice,
    to_bucket_sets,
    update,
)
from src.scheduler.models import BucketMap, make_tags


LOGGER = logging.getLogger(__name__)


class ReviewSession:
    """Keep the deck, bucket mapping, answer history and day counter together."""

    def __init__(self, start_day: int = 0) -> None:
        if start_day < 0:
            raise ValueError("start_day must be non-negative.")
        self._day = start_day
        self._next_id = 1
        self._cards: Dict[int, Flashcard] = {}
        self._ids: Dict[Flashcard, int] = {}
        self._buckets: BucketMap = {}
        self._history: Dict[int, List[AnswerDifficulty]] = {}
        self._queue: Deque[int] = deque()
        self._answered_today: Set[int] = set()
        self._due_ids: Optional[Set[int]] = None

    @property
    def day(self) -> int:
        return self._day

    @property
    def buckets(self) -> BucketMap:
        return self._buckets

    @property
    def history(self) -> Dict[int, List[AnswerDifficulty]]:
        return self._history

    def __len__(self) -> int:
        return len(self._cards)

    def add_card(self, front: str, back: str, hint: str = "", tags: Iterable[str] = ()) -> int:
        """Create a card in bucket 0 and return its id."""
        front = (front or "").strip()
        back = (back or "").strip()
        if not front or not back:
            raise ValueError("A flashcard needs both a front and a back.")

        card = Flashcard(front=front, back=back, hint=(hint or "").strip(), tags=make_tags(tags))
        card_id = self._next_id
        self._next_id += 1
        self._cards[card_id] = card
        self._ids[card] = card_id
        self._buckets.setdefault(0, set()).add(card)
        if self._due_ids is not None:
            self._due_ids.add(card_id)
        LOGGER.debug("Added card %s (%r) to bucket 0.", card_id, front)
        return card_id

    def card(self, card_id: int) -> Optional[Flashcard]:
        return self._cards.get(card_id)

    def card_id(self, card: Flashcard) -> Optional[int]:
        return self._ids.get(card)

    def bucket_of(self, card_id: int) -> Optional[int]:
        """Return the bucket currently holding the card, if any."""
        card = self._cards.get(card_id)
        if card is None:
            return None
        for bucket_number, bucket in self._buckets.items():
            if card in bucket:
                return bucket_number
        return None

    def _today_due_ids(self) -> Set[int]:
        if self._due_ids is None:
            due = practice(to_bucket_sets(self._buckets), self._day)
            self._due_ids = {self._ids[card] for card in due}
        return self._due_ids

    def due_today(self) -> List[int]:
        """Return ids of the cards due today and refill the pending queue with them.

        The due set is fixed by the first call of the day, so answers given
        today do not change which cards count as due.
        """
        card_ids = sorted(self._today_due_ids())
        self._queue = deque(card_id for card_id in card_ids if card_id not in self._answered_today)
        return card_ids

    def is_due(self, card_id: int) -> bool:
        return card_id in self._today_due_ids()

    def answered_today(self, card_id: int) -> bool:
        return card_id in self._answered_today

    def next_due(self) -> Optional[int]:
        """Pop the next card of today's queue that has not been answered yet."""
        while self._queue:
            card_id = self._queue.popleft()
            if card_id not in self._answered_today:
                return card_id
        return None

    def pending_count(self) -> int:
        return sum(1 for card_id in self._queue if card_id not in self._answered_today)

    def record_answer(self, card_id: int, difficulty: AnswerDifficulty) -> Optional[int]:
        """Store the outcome, move the card and return its new bucket.

        Unknown cards, cards already answered today and cards that are not due
        today are left untouched and yield ``None``.
        """
        card = self._cards.get(card_id)
        if card is None:
            LOGGER.debug("Ignoring answer for unknown card %s.", card_id)
            return None
        if card_id in self._answered_today or not self.is_due(card_id):
            LOGGER.debug("Ignoring answer for card %s on day %s.", card_id, self._day)
            return None

        self._history.setdefault(card_id, []).append(difficulty)
        self._buckets = update(self._buckets, card, difficulty)
        self._answered_today.add(card_id)
        return self.bucket_of(card_id)

    def hint(self, card_id: int) -> Optional[str]:
        card = self._cards.get(card_id)
        if card is None:
            return None
        return get_hint(card)

    def advance_day(self, days: int = 1) -> int:
        """Move the day counter forward and forget today's queue."""
        if days < 1:
            raise ValueError("days must be a positive integer.")
        self._day += days
        self._queue.clear()
        self._answered_today.clear()
        self._due_ids = None
        LOGGER.info("Advanced review day to %s.", self._day)
        return self._day

    def progress(self) -> ProgressStats:
        return compute_progress(self._buckets, self._history)

    def bucket_range(self) -> Optional[BucketRange]:
        return get_bucket_range(to_bucket_sets(self._buckets))
