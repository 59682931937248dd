"""Bootstrap logic for running the Telegram bot."""

from __future__ import annotations

import asyncio
import logging

from src.app.settings import AppSettings
from src.bot import LeitnerReviewAgent, ReviewSession, build_application


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )
    # httpx logs every Telegram poll at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _ensure_event_loop() -> None:
    """Guarantee that an asyncio event loop exists for the current thread."""
    try:
        asyncio.get_event_loop()
    except RuntimeError:
        asyncio.set_event_loop(asyncio.new_event_loop())


def build_agent(settings: AppSettings) -> LeitnerReviewAgent:
    """Create the review agent with a fresh in-memory session."""
    session = ReviewSession(start_day=settings.start_day)
    return LeitnerReviewAgent(session, owner_chat_id=settings.owner_chat_id)


def run_bot(settings: AppSettings) -> None:
    """Start the Telegram bot using the provided settings."""
    _configure_logging(settings.log_level)
    print(f"{settings.app_name} is running in {settings.app_env} mode.")

    agent = build_agent(settings)
    application = build_application(settings.telegram_bot_token, agent)

    _ensure_event_loop()

    LOGGER.info(
        "Starting Telegram bot for %s in %s mode at day %s.",
        settings.app_name,
        settings.app_env,
        settings.start_day,
    )
    application.run_polling()
