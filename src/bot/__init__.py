"""Telegram components for the Leitner review bot."""

from .agent import LeitnerReviewAgent
from .session import ReviewSession
from .telegram import build_application

__all__ = ["LeitnerReviewAgent", "ReviewSession", "build_application"]
