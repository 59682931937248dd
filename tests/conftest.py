from __future__ import annotations

import pytest

from src.bot.session import ReviewSession
from src.scheduler import Flashcard


@pytest.fixture
def cards() -> list[Flashcard]:
    return [
        Flashcard(f"Q{index}", f"A{index}", f"Hint{index}", {f"tag{index}"})
        for index in range(1, 5)
    ]


@pytest.fixture
def session() -> ReviewSession:
    return ReviewSession()
