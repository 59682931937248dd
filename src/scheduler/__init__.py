"""Modified-Leitner bucket scheduling for flashcard reviews."""

from .algorithm import (
    compute_progress,
    get_bucket_range,
    get_hint,
    practice,
    to_bucket_sets,
    update,
)
from .models import AnswerDifficulty, BucketRange, Flashcard, ProgressStats

__all__ = [
    "AnswerDifficulty",
    "BucketRange",
    "Flashcard",
    "ProgressStats",
    "compute_progress",
    "get_bucket_range",
    "get_hint",
    "practice",
    "to_bucket_sets",
    "update",
]
