"""Telegram application wiring for the Leitner review bot."""

from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
)

from .agent import LeitnerReviewAgent


def build_application(bot_token: str, agent: LeitnerReviewAgent) -> Application:
    """Configure the Telegram application instance."""
    application = ApplicationBuilder().token(bot_token).build()
    application.add_handler(CommandHandler(["start", "help"], agent.handle_start))
    application.add_handler(CommandHandler("add", agent.handle_add))
    application.add_handler(CommandHandler("practice", agent.handle_practice))
    application.add_handler(CommandHandler("progress", agent.handle_progress))
    application.add_handler(CommandHandler("nextday", agent.handle_next_day))
    application.add_handler(CallbackQueryHandler(agent.handle_hint, pattern=r"^lt_hint:"))
    application.add_handler(CallbackQueryHandler(agent.handle_show, pattern=r"^lt_show:"))
    application.add_handler(CallbackQueryHandler(agent.handle_rate, pattern=r"^lt_rate:"))
    return application
