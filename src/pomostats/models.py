"""Data model shared by the loader, the analysis pipeline and reports.

Cards carry optional pomodoro annotations.  ``None`` means the matcher has
not attached anything to the card yet, which is distinct from an empty list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .config import COMMENT_ACTION_TYPE, HOUR_NAMES, POMODORO_PREFIX, WEEKDAY_NAMES


class InvalidBoardError(ValueError):
    """Raised when a board export is structurally unusable."""


@dataclass
class PomodoroEvent:
    sequence_number: int
    timestamp: datetime
    card: Optional["Card"] = field(default=None, repr=False, compare=False)


@dataclass
class Card:
    id: str
    name: str = ""
    pomodoro_events: Optional[List[PomodoroEvent]] = None
    pomodoro_total: Optional[int] = None

    @property
    def annotated(self) -> bool:
        return self.pomodoro_total is not None


@dataclass
class Action:
    type: str
    text: str
    timestamp: datetime
    card_id: Optional[str] = None


def is_pomodoro_comment(action: Action) -> bool:
    """Return True if the action is a comment starting with the pomodoro prefix."""
    return action.type == COMMENT_ACTION_TYPE and action.text[: len(POMODORO_PREFIX)] == POMODORO_PREFIX


@dataclass
class BoardDocument:
    cards: List[Card]
    actions: List[Action]
    name: str = ""

    def card_index(self) -> Dict[str, Card]:
        """Map card ids to cards, keeping the first card for a repeated id."""
        index: Dict[str, Card] = {}
        for card in self.cards:
            index.setdefault(card.id, card)
        return index


@dataclass(frozen=True)
class CardTotal:
    id: str
    name: str
    total: int
    events: int


@dataclass(frozen=True)
class StatisticsResult:
    """Aggregated pomodoro counts for one board.

    ``total_pomodoros`` sums the first reported number of every card, while
    the histograms sum the deltas between its logged comments.  Both are
    kept as computed and never reconciled.
    """

    total_pomodoros: int
    weekday_counts: Tuple[int, ...]
    hour_counts: Tuple[int, ...]
    weekday_hour_matrix: Tuple[Tuple[int, ...], ...]
    cards: Tuple[CardTotal, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the boundary form used by reports.

        ``weekdays``, ``hours`` and ``daysHours`` are JSON strings so that
        each can be handed to a template or chart as-is.
        """
        return {
            "pomodoroAmount": self.total_pomodoros,
            "weekdays": json.dumps({"pomodoros": list(self.weekday_counts), "names": WEEKDAY_NAMES}),
            "hours": json.dumps({"pomodoros": list(self.hour_counts), "names": HOUR_NAMES}),
            "daysHours": json.dumps([list(row) for row in self.weekday_hour_matrix]),
            "cards": [
                {"id": c.id, "name": c.name, "pomodoros": c.total, "events": c.events}
                for c in self.cards
            ],
        }
