"""Spending summary package."""

from src.queries.summary import most_recent_first, summarize

__all__ = ["most_recent_first", "summarize"]
