"""Analysis pipeline for pomostats.

Pomodoros are logged on Trello cards as comments of the form
``Pomodoro #N``, where N is the running count of pomodoros spent on that
card.  Matching attaches those comments to their cards; aggregation then
turns each card's cumulative numbers into per-comment increments and buckets
them by weekday and hour of the comment's timestamp.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import replace
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

import typer

from . import config
from .ingest import load_board
from .models import BoardDocument, Card, CardTotal, PomodoroEvent, StatisticsResult, is_pomodoro_comment

logger = logging.getLogger(__name__)

app = typer.Typer(name="analyze")

_LEADING_DIGITS = re.compile(r"\s*([0-9]+)")


def parse_sequence_number(text: str) -> Optional[int]:
    """Read the pomodoro number that follows the prefix in a comment.

    Only the leading digits of the window after the prefix count, so
    "Pomodoro #4 (with a break)" gives 4.  Returns None when no digits follow.
    """
    start = len(config.POMODORO_PREFIX)
    match = _LEADING_DIGITS.match(text[start : start + config.SEQUENCE_WINDOW])
    if not match:
        return None
    return int(match.group(1))


def match_pomodoros(board: BoardDocument) -> BoardDocument:
    """Attach pomodoro comments to their cards.

    Returns a copy of the board whose cards carry ``pomodoro_events`` and
    ``pomodoro_total``; the given board is left untouched.  Actions are
    visited in the order supplied.  The first comment seen for a card fixes
    its total.  Comments without a number and comments on unknown cards are
    skipped.
    """
    cards = [replace(card, pomodoro_events=None, pomodoro_total=None) for card in board.cards]
    annotated = BoardDocument(cards=cards, actions=list(board.actions), name=board.name)
    index = annotated.card_index()

    for action in annotated.actions:
        if not is_pomodoro_comment(action):
            continue
        number = parse_sequence_number(action.text)
        if number is None:
            logger.debug("Skipping pomodoro comment without a number: %r", action.text)
            continue
        card = index.get(action.card_id)
        if card is None:
            logger.debug("Skipping pomodoro comment for unknown card %s", action.card_id)
            continue
        if card.pomodoro_events is None:
            # the newest comment comes first, so it holds the card's total
            card.pomodoro_events = []
            card.pomodoro_total = number
        card.pomodoro_events.append(PomodoroEvent(number, action.timestamp, card))

    return annotated


class StatsAggregator:
    """Fold annotated cards into pomodoro counters.

    Each aggregator owns its counters; create one per board.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz
        self.total_pomodoros = 0
        self.weekday_counts: List[int] = [0] * 7
        self.hour_counts: List[int] = [0] * 24
        self.matrix: List[List[int]] = [[0] * 24 for _ in range(7)]
        self.cards: List[CardTotal] = []

    def _local(self, timestamp: datetime) -> datetime:
        return timestamp.astimezone(self.tz)

    def update(self, card: Card) -> None:
        """Add one card's pomodoros.  Cards without annotations are ignored."""
        if card.pomodoro_total is None:
            return
        events = card.pomodoro_events or []
        self.total_pomodoros += card.pomodoro_total
        self.cards.append(CardTotal(card.id, card.name, card.pomodoro_total, len(events)))

        previous = 0
        for event in reversed(events):
            # numbers are cumulative per card; negative when logs go backwards
            done = event.sequence_number - previous
            when = self._local(event.timestamp)
            day, hour = when.weekday(), when.hour
            self.weekday_counts[day] += done
            self.hour_counts[hour] += done
            self.matrix[day][hour] += done
            previous = event.sequence_number

    def result(self) -> StatisticsResult:
        return StatisticsResult(
            total_pomodoros=self.total_pomodoros,
            weekday_counts=tuple(self.weekday_counts),
            hour_counts=tuple(self.hour_counts),
            weekday_hour_matrix=tuple(tuple(row) for row in self.matrix),
            cards=tuple(self.cards),
        )


def aggregate(cards: Iterable[Card], tz: Optional[tzinfo] = None) -> StatisticsResult:
    """Aggregate annotated cards into a fresh StatisticsResult."""
    aggregator = StatsAggregator(tz)
    for card in cards:
        aggregator.update(card)
    return aggregator.result()


def analyze_board(board: BoardDocument, tz: Optional[tzinfo] = None) -> StatisticsResult:
    """Match and aggregate a board in one step."""
    return aggregate(match_pomodoros(board).cards, tz)


@app.command()
def run(
    input: str = typer.Option(..., help="Path to the Trello board export (JSON)"),
    out: str = typer.Option(..., help="Path to output JSON file"),
    timezone: Optional[str] = typer.Option(None, help="IANA zone for weekday/hour buckets (default: local)"),
) -> None:
    """Compute pomodoro statistics for a board export."""
    try:
        tz = config.get_timezone(timezone)
        board = load_board(input)
    except (ValueError, OSError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)
    stats = analyze_board(board, tz)
    data = stats.to_dict()
    data["board"] = board.name
    out_path = os.path.abspath(out)
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("Wrote statistics for %d cards to %s", len(stats.cards), out_path)
    typer.echo(f"Analysis complete. {stats.total_pomodoros} pomodoros on {len(stats.cards)} cards written to {out}")
