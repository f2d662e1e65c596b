"""Loading of Trello board exports for pomostats.

This module turns a Trello board export (the JSON file produced by the
board's "Print and Export" menu) into a :class:`~pomostats.models.BoardDocument`.
Only the top-level ``name``, ``cards`` and ``actions`` keys are kept; the
file is streamed with ijson so that the remaining (often large) keys such as
``checklists`` or ``members`` never need to be held in memory at once.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import ijson
import typer

from .models import Action, BoardDocument, Card, InvalidBoardError, is_pomodoro_comment

logger = logging.getLogger(__name__)

app = typer.Typer(name="ingest")

BOARD_KEYS = ("name", "cards", "actions")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 Trello date into an aware datetime.

    Trello dates end in ``Z``; naive values are taken to be UTC.
    """
    if not isinstance(value, str) or not value:
        raise InvalidBoardError(f"Invalid action date: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidBoardError(f"Invalid action date: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_card(raw: Dict[str, Any]) -> Card:
    if not isinstance(raw, dict) or not raw.get("id"):
        raise InvalidBoardError("Card without an id")
    return Card(id=str(raw["id"]), name=raw.get("name") or "")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_action(raw: Any) -> Optional[Action]:
    """Build an Action, or return None when it has no usable date.

    Actions are otherwise taken as they come: a malformed payload only means
    the action cannot be a pomodoro comment.
    """
    if not isinstance(raw, dict):
        logger.debug("Skipping action that is not an object: %r", raw)
        return None
    try:
        timestamp = parse_timestamp(raw.get("date"))
    except InvalidBoardError as e:
        logger.debug("Skipping action %s: %s", raw.get("id"), e)
        return None
    data = _as_dict(raw.get("data"))
    card_id = _as_dict(data.get("card")).get("id")
    text = data.get("text")
    action_type = raw.get("type")
    return Action(
        type=action_type if isinstance(action_type, str) else "",
        text=text if isinstance(text, str) else "",
        timestamp=timestamp,
        card_id=str(card_id) if card_id is not None else None,
    )


def board_from_dict(raw: Dict[str, Any]) -> BoardDocument:
    """Build a BoardDocument from an already parsed Trello export.

    Args:
        raw: The decoded JSON object of the export.

    Raises:
        InvalidBoardError: if ``cards`` or ``actions`` is missing or is not a
            list, or a card has no id.  Actions without a usable date are
            dropped rather than rejected.
    """
    if not isinstance(raw, dict):
        raise InvalidBoardError("Board export must be a JSON object")
    for key in ("cards", "actions"):
        if not isinstance(raw.get(key), list):
            raise InvalidBoardError(f"Board export has no '{key}' list")
    cards: List[Card] = [_parse_card(c) for c in raw["cards"]]
    actions: List[Action] = [a for a in map(_parse_action, raw["actions"]) if a is not None]
    logger.debug("Parsed board with %d cards and %d actions", len(cards), len(actions))
    return BoardDocument(cards=cards, actions=actions, name=raw.get("name") or "")


def load_board(path: str) -> BoardDocument:
    """Stream a board export file and build a BoardDocument from it."""
    input_path = os.path.abspath(path)
    raw: Dict[str, Any] = {}
    with open(input_path, "rb") as f:
        try:
            for key, value in ijson.kvitems(f, ""):
                if key in BOARD_KEYS:
                    raw[key] = value
        except ijson.JSONError as e:
            raise InvalidBoardError(f"{input_path} is not valid JSON: {e}") from e
    logger.info("Loaded board export %s", input_path)
    return board_from_dict(raw)


@app.command()
def summary(input: str = typer.Option(..., help="Path to the Trello board export (JSON)")) -> None:
    """Show how many cards, actions and pomodoro comments an export holds."""
    try:
        board = load_board(input)
    except (InvalidBoardError, OSError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)
    comments = sum(1 for action in board.actions if is_pomodoro_comment(action))
    title = board.name or os.path.basename(input)
    typer.echo(f"{title}: {len(board.cards)} cards, {len(board.actions)} actions, {comments} pomodoro comments")
