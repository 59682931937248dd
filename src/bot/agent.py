"""Telegram handlers for practising flashcards with the Leitner scheduler."""

from __future__ import annotations

import logging
from html import escape
from typing import List, Optional, Tuple

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Message, Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from src.bot.session import ReviewSession
from src.scheduler import AnswerDifficulty


LOGGER = logging.getLogger(__name__)

_DIFFICULTY_LABELS = (
    (AnswerDifficulty.WRONG, "Wrong"),
    (AnswerDifficulty.HARD, "Hard"),
    (AnswerDifficulty.EASY, "Easy"),
)

HELP_TEXT = (
    "Hi! I schedule your flashcards with a Leitner system.\n"
    "- /add front | back | hint - add a card (hint is optional);\n"
    "- /practice - review the cards due today;\n"
    "- /progress - see your bucket spread and answer counts;\n"
    "- /nextday - move on to the next study day."
)


class LeitnerReviewAgent:
    """Presents due cards, collects answers and reports progress for one learner."""

    def __init__(self, session: ReviewSession, owner_chat_id: Optional[int] = None) -> None:
        self._session = session
        self._owner_chat_id = owner_chat_id

    @property
    def session(self) -> ReviewSession:
        return self._session

    def _is_allowed(self, chat_id: int) -> bool:
        return self._owner_chat_id is None or chat_id == self._owner_chat_id

    def _query_allowed(self, query) -> bool:
        message = query.message
        if message is None or message.chat is None:
            return self._owner_chat_id is None
        return self._is_allowed(message.chat.id)

    @staticmethod
    def _escape_html(text: Optional[str]) -> str:
        if not text:
            return ""
        return escape(text, quote=False)

    @staticmethod
    def parse_card_arguments(text: str) -> Tuple[str, str, str]:
        """Split ``front | back | hint`` into its parts; the hint may be omitted."""
        parts = [part.strip() for part in text.split("|")]
        if len(parts) < 2 or len(parts) > 3:
            raise ValueError("Use the format: /add front | back | hint")
        front, back = parts[0], parts[1]
        hint = parts[2] if len(parts) == 3 else ""
        return front, back, hint

    @staticmethod
    def _build_question_keyboard(card_id: int) -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup(
            [
                [
                    InlineKeyboardButton("Hint", callback_data=f"lt_hint:{card_id}"),
                    InlineKeyboardButton("Show answer", callback_data=f"lt_show:{card_id}"),
                ]
            ]
        )

    @staticmethod
    def _build_rating_keyboard(card_id: int) -> InlineKeyboardMarkup:
        buttons = [
            InlineKeyboardButton(label, callback_data=f"lt_rate:{card_id}:{int(difficulty)}")
            for difficulty, label in _DIFFICULTY_LABELS
        ]
        return InlineKeyboardMarkup([buttons])

    def _format_question(self, card_id: int) -> str:
        card = self._session.card(card_id)
        front = self._escape_html(card.front if card else "")
        remaining = self._session.pending_count()
        lines = [f"❓ <b>{front}</b>"]
        if remaining:
            lines.append(f"<i>{remaining} more due today</i>")
        return "\n".join(lines)

    def _format_answer(self, card_id: int) -> str:
        card = self._session.card(card_id)
        if card is None:
            return ""
        lines = [
            f"❓ <b>{self._escape_html(card.front)}</b>",
            f"💡 {self._escape_html(card.back)}",
        ]
        if card.tags:
            lines.append(f"🏷 {self._escape_html(', '.join(sorted(card.tags)))}")
        return "\n".join(lines)

    def format_progress(self) -> str:
        stats = self._session.progress()
        occupied = self._session.bucket_range()
        lines: List[str] = [
            "📊 <b>Progress</b>",
            f"🗓 Day {self._session.day}, {len(self._session)} cards",
            f"🪜 Buckets: {stats.min_bucket}–{stats.max_bucket}",
        ]
        if occupied is None:
            lines.append("📭 No cards in any bucket yet.")
        else:
            lines.append(f"📦 Occupied buckets: {occupied.min_bucket}–{occupied.max_bucket}")
        lines.extend(
            [
                f"✅ Easy: {stats.easy_count}",
                f"🤔 Hard: {stats.hard_count}",
                f"❌ Wrong: {stats.wrong_count}",
            ]
        )
        return "\n".join(lines)

    async def _send_next_card(self, message: Message) -> None:
        card_id = self._session.next_due()
        if card_id is None:
            await message.reply_text("Nothing left to review today. Use /nextday to move on.")
            return
        await message.reply_text(
            self._format_question(card_id),
            parse_mode=ParseMode.HTML,
            reply_markup=self._build_question_keyboard(card_id),
        )

    @staticmethod
    def _parse_callback(data: Optional[str], prefix: str, size: int) -> Optional[List[int]]:
        if data is None:
            return None
        parts = data.split(":")
        if len(parts) != size or parts[0] != prefix:
            return None
        try:
            return [int(part) for part in parts[1:]]
        except ValueError:
            return None

    async def handle_start(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Describe the available commands."""
        if not update.message:
            return
        chat = update.effective_chat
        if chat is None or not self._is_allowed(chat.id):
            return
        await update.message.reply_text(HELP_TEXT)

    async def handle_add(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Add a card from ``/add front | back | hint``."""
        if not update.message:
            return
        chat = update.effective_chat
        if chat is None or not self._is_allowed(chat.id):
            return

        text = (update.message.text or "").partition(" ")[2]
        try:
            front, back, hint = self.parse_card_arguments(text)
            card_id = self._session.add_card(front, back, hint)
        except ValueError as exc:
            await update.message.reply_text(str(exc))
            return

        LOGGER.info("Added card %s for chat %s.", card_id, chat.id)
        await update.message.reply_text(
            f"Card added: <b>{self._escape_html(front)}</b>. It starts in bucket 0.",
            parse_mode=ParseMode.HTML,
        )

    async def handle_practice(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Load the cards due today and show the first one."""
        if not update.message:
            return
        chat = update.effective_chat
        if chat is None or not self._is_allowed(chat.id):
            return

        if not len(self._session):
            await update.message.reply_text("Your deck is empty. Add a card with /add first.")
            return

        due = self._session.due_today()
        LOGGER.info("Day %s: %s cards due for chat %s.", self._session.day, len(due), chat.id)
        await self._send_next_card(update.message)

    async def handle_progress(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Send bucket spread and answer counts."""
        if not update.message:
            return
        chat = update.effective_chat
        if chat is None or not self._is_allowed(chat.id):
            return
        await update.message.reply_text(self.format_progress(), parse_mode=ParseMode.HTML)

    async def handle_next_day(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Advance the day counter."""
        if not update.message:
            return
        chat = update.effective_chat
        if chat is None or not self._is_allowed(chat.id):
            return
        day = self._session.advance_day()
        await update.message.reply_text(f"It is now day {day}. Use /practice to review.")

    async def handle_hint(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        query = update.callback_query
        if query is None:
            return
        if not self._query_allowed(query):
            await query.answer()
            return

        parsed = self._parse_callback(query.data, "lt_hint", 2)
        if parsed is None:
            await query.answer("Invalid request.", show_alert=True)
            return

        hint = self._session.hint(parsed[0])
        if hint is None:
            await query.answer("Card not found.", show_alert=True)
            return
        await query.answer(hint or "No hint for this card.", show_alert=True)

    async def handle_show(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        query = update.callback_query
        if query is None:
            return
        if not self._query_allowed(query):
            await query.answer()
            return

        parsed = self._parse_callback(query.data, "lt_show", 2)
        if parsed is None:
            await query.answer("Invalid request.", show_alert=True)
            return

        card_id = parsed[0]
        if self._session.card(card_id) is None:
            await query.answer("Card not found.", show_alert=True)
            return

        prompt = self._format_answer(card_id)
        try:
            await query.edit_message_text(
                prompt,
                parse_mode=ParseMode.HTML,
                reply_markup=self._build_rating_keyboard(card_id),
            )
        except Exception:  # pragma: no cover - best effort update
            LOGGER.debug("Could not reveal flashcard answer.", exc_info=True)
            message = query.message
            if message is not None:
                await message.reply_text(
                    prompt,
                    parse_mode=ParseMode.HTML,
                    reply_markup=self._build_rating_keyboard(card_id),
                )
        await query.answer()

    async def handle_rate(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        query = update.callback_query
        if query is None:
            return
        if not self._query_allowed(query):
            await query.answer()
            return

        parsed = self._parse_callback(query.data, "lt_rate", 3)
        if parsed is None:
            await query.answer("Invalid rating.", show_alert=True)
            return

        card_id, raw_difficulty = parsed
        try:
            difficulty = AnswerDifficulty(raw_difficulty)
        except ValueError:
            await query.answer("Invalid rating.", show_alert=True)
            return

        new_bucket = self._session.record_answer(card_id, difficulty)
        if new_bucket is None:
            if self._session.card(card_id) is None:
                await query.answer("Card not found.", show_alert=True)
            elif self._session.answered_today(card_id):
                await query.answer("Already rated today.", show_alert=True)
            else:
                await query.answer("This card is not due today.", show_alert=True)
            return

        try:
            await query.edit_message_reply_markup(reply_markup=None)
        except Exception:  # pragma: no cover - best effort cleanup
            LOGGER.debug("Could not clear rating markup.", exc_info=True)

        await query.answer(f"Moved to bucket {new_bucket}.")

        message = query.message
        if message is not None:
            await self._send_next_card(message)
