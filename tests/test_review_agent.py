from __future__ import annotations

import types

import pytest
from telegram import InlineKeyboardMarkup

from src.bot.agent import LeitnerReviewAgent
from src.bot.session import ReviewSession
from src.scheduler import AnswerDifficulty


class _StubMessage:
    def __init__(self, chat_id: int, text: str | None = None) -> None:
        self.chat = types.SimpleNamespace(id=chat_id)
        self.text = text
        self.replies: list[tuple[str, dict]] = []

    async def reply_text(self, text: str, **kwargs) -> None:
        self.replies.append((text, kwargs))


class _StubCallbackQuery:
    def __init__(self, message: _StubMessage, data: str) -> None:
        self.message = message
        self.data = data
        self.answers: list[tuple[str | None, bool]] = []
        self.edited_text: str | None = None
        self.edited_markup: InlineKeyboardMarkup | None = None
        self.markup_cleared = False

    async def answer(self, text: str | None = None, show_alert: bool = False) -> None:
        self.answers.append((text, show_alert))

    async def edit_message_text(self, text: str, parse_mode=None, reply_markup=None) -> None:
        self.edited_text = text
        self.edited_markup = reply_markup

    async def edit_message_reply_markup(self, reply_markup=None) -> None:
        self.markup_cleared = reply_markup is None


def _command_update(chat_id: int, text: str) -> types.SimpleNamespace:
    message = _StubMessage(chat_id, text)
    return types.SimpleNamespace(
        message=message,
        effective_chat=types.SimpleNamespace(id=chat_id),
        callback_query=None,
    )


def _callback_update(chat_id: int, data: str) -> types.SimpleNamespace:
    query = _StubCallbackQuery(_StubMessage(chat_id), data)
    return types.SimpleNamespace(callback_query=query, message=None, effective_chat=None)


@pytest.mark.asyncio
async def test_add_command_creates_card() -> None:
    agent = LeitnerReviewAgent(ReviewSession())
    update = _command_update(7, "/add το σπίτι | house | starts with σ")

    await agent.handle_add(update, None)

    card = agent.session.card(1)
    assert card is not None
    assert (card.front, card.back, card.hint) == ("το σπίτι", "house", "starts with σ")
    assert "Card added" in update.message.replies[0][0]


@pytest.mark.asyncio
async def test_add_command_reports_bad_format() -> None:
    agent = LeitnerReviewAgent(ReviewSession())
    update = _command_update(7, "/add only a front")

    await agent.handle_add(update, None)

    assert len(agent.session) == 0
    assert update.message.replies[0][0].startswith("Use the format")


@pytest.mark.asyncio
async def test_practice_shows_first_due_card() -> None:
    session = ReviewSession()
    session.add_card("Q1", "A1")
    session.add_card("Q2", "A2")
    agent = LeitnerReviewAgent(session)
    update = _command_update(7, "/practice")

    await agent.handle_practice(update, None)

    text, kwargs = update.message.replies[0]
    assert "Q1" in text
    assert "1 more due today" in text
    markup = kwargs["reply_markup"]
    assert [button.callback_data for button in markup.inline_keyboard[0]] == ["lt_hint:1", "lt_show:1"]


@pytest.mark.asyncio
async def test_practice_on_empty_deck() -> None:
    agent = LeitnerReviewAgent(ReviewSession())
    update = _command_update(7, "/practice")

    await agent.handle_practice(update, None)

    assert "deck is empty" in update.message.replies[0][0]


@pytest.mark.asyncio
async def test_hint_and_show_callbacks() -> None:
    session = ReviewSession()
    card_id = session.add_card("Q1", "A1")
    agent = LeitnerReviewAgent(session)

    hint_update = _callback_update(7, f"lt_hint:{card_id}")
    await agent.handle_hint(hint_update, None)
    assert hint_update.callback_query.answers == [("Q", True)]

    show_update = _callback_update(7, f"lt_show:{card_id}")
    await agent.handle_show(show_update, None)
    query = show_update.callback_query
    assert "A1" in query.edited_text
    labels = [button.text for button in query.edited_markup.inline_keyboard[0]]
    assert labels == ["Wrong", "Hard", "Easy"]


@pytest.mark.asyncio
async def test_rate_callback_moves_card_and_offers_next() -> None:
    session = ReviewSession()
    first = session.add_card("Q1", "A1")
    session.add_card("Q2", "A2")
    session.due_today()
    session.next_due()
    agent = LeitnerReviewAgent(session)

    update = _callback_update(7, f"lt_rate:{first}:{int(AnswerDifficulty.EASY)}")
    await agent.handle_rate(update, None)

    query = update.callback_query
    assert session.bucket_of(first) == 1
    assert query.markup_cleared is True
    assert query.answers == [("Moved to bucket 1.", False)]
    assert "Q2" in query.message.replies[0][0]


@pytest.mark.asyncio
async def test_rate_callback_rejects_invalid_data() -> None:
    session = ReviewSession()
    card_id = session.add_card("Q1", "A1")
    agent = LeitnerReviewAgent(session)

    bad_difficulty = _callback_update(7, f"lt_rate:{card_id}:9")
    await agent.handle_rate(bad_difficulty, None)
    assert bad_difficulty.callback_query.answers == [("Invalid rating.", True)]

    unknown_card = _callback_update(7, "lt_rate:99:2")
    await agent.handle_rate(unknown_card, None)
    assert unknown_card.callback_query.answers == [("Card not found.", True)]
    assert session.history == {}


@pytest.mark.asyncio
async def test_progress_reports_both_ranges() -> None:
    session = ReviewSession()
    card_id = session.add_card("Q1", "A1")
    session.record_answer(card_id, AnswerDifficulty.EASY)
    agent = LeitnerReviewAgent(session)
    update = _command_update(7, "/progress")

    await agent.handle_progress(update, None)

    text = update.message.replies[0][0]
    assert "Buckets: 0–1" in text
    assert "Occupied buckets: 1–1" in text
    assert "Easy: 1" in text


@pytest.mark.asyncio
async def test_updates_from_other_chats_are_ignored() -> None:
    agent = LeitnerReviewAgent(ReviewSession(), owner_chat_id=7)
    update = _command_update(8, "/add front | back")

    await agent.handle_add(update, None)

    assert len(agent.session) == 0
    assert update.message.replies == []


@pytest.mark.asyncio
async def test_next_day_command_advances_counter() -> None:
    agent = LeitnerReviewAgent(ReviewSession())
    update = _command_update(7, "/nextday")

    await agent.handle_next_day(update, None)

    assert agent.session.day == 1
    assert "day 1" in update.message.replies[0][0]


@pytest.mark.asyncio
async def test_rating_the_same_card_twice_is_rejected() -> None:
    session = ReviewSession()
    card_id = session.add_card("Q1", "A1")
    agent = LeitnerReviewAgent(session)
    data = f"lt_rate:{card_id}:{int(AnswerDifficulty.EASY)}"

    first = _callback_update(7, data)
    await agent.handle_rate(first, None)
    second = _callback_update(7, data)
    await agent.handle_rate(second, None)

    assert session.bucket_of(card_id) == 1
    assert session.history[card_id] == [AnswerDifficulty.EASY]
    assert second.callback_query.answers == [("Already rated today.", True)]
    assert second.callback_query.markup_cleared is False


@pytest.mark.asyncio
async def test_rating_a_card_that_is_not_due_is_rejected() -> None:
    session = ReviewSession()
    card_id = session.add_card("Q1", "A1")
    session.record_answer(card_id, AnswerDifficulty.EASY)
    session.advance_day()
    agent = LeitnerReviewAgent(session)

    update = _callback_update(7, f"lt_rate:{card_id}:{int(AnswerDifficulty.EASY)}")
    await agent.handle_rate(update, None)

    assert session.bucket_of(card_id) == 1
    assert update.callback_query.answers == [("This card is not due today.", True)]
