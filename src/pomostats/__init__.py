"""Pomodoro statistics for Trello boards.

This package contains the core logic for ingesting Trello board exports,
matching "Pomodoro #N" comments to their cards, aggregating them into
weekday and hour statistics, and generating reports.
"""

__all__ = [
    "cli",
    "config",
    "models",
    "ingest",
    "analyze",
    "report",
]
