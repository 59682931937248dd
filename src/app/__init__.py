"""Application bootstrap helpers for the Leitner review bot."""

from .runtime import build_agent, run_bot
from .settings import AppSettings

__all__ = ["build_agent", "run_bot", "AppSettings"]
