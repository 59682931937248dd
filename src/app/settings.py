"""Configuration helpers for the Leitner review bot runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_APP_NAME = "Leitner Review Bot"


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    telegram_bot_token: str
    owner_chat_id: Optional[int]
    start_day: int

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", DEFAULT_APP_NAME)
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        telegram_bot_token = os.getenv("TELEGRAM_BOT_TOKEN")

        if not telegram_bot_token:
            raise RuntimeError(
                "TELEGRAM_BOT_TOKEN environment variable is required to start the Telegram bot."
            )

        raw_owner = os.getenv("TELEGRAM_OWNER_CHAT_ID", "").strip()
        owner_chat_id: Optional[int] = None
        if raw_owner:
            try:
                owner_chat_id = int(raw_owner)
            except ValueError as exc:
                raise RuntimeError("TELEGRAM_OWNER_CHAT_ID must be an integer.") from exc

        try:
            start_day = int(os.getenv("LEITNER_START_DAY", "0"))
        except ValueError as exc:
            raise RuntimeError("LEITNER_START_DAY must be an integer.") from exc

        if start_day < 0:
            raise RuntimeError("LEITNER_START_DAY must not be negative.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            telegram_bot_token=telegram_bot_token,
            owner_chat_id=owner_chat_id,
            start_day=start_day,
        )
