from src.app import AppSettings, run_bot
from src.bot.agent import LeitnerReviewAgent
from src.bot.session import ReviewSession

__all__ = ["main", "LeitnerReviewAgent", "ReviewSession"]


def main() -> None:
    """Entry point for the application."""
    settings = AppSettings.from_env()
    run_bot(settings)


if __name__ == "__main__":
    main()
