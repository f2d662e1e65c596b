"""Shared fixtures for pomostats tests."""

import json
from datetime import datetime, timezone

import pytest

from pomostats.models import Action, BoardDocument, Card


def comment(text, card_id, date):
    """Build a raw Trello commentCard action."""
    return {
        "id": f"a-{card_id}-{date}",
        "type": "commentCard",
        "date": date,
        "data": {"text": text, "card": {"id": card_id, "name": card_id}},
        "memberCreator": {"fullName": "Test User"},
    }


def make_action(text, card_id, when, type="commentCard"):
    return Action(type=type, text=text, timestamp=when, card_id=card_id)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def make_board(actions, card_ids=("c1",)):
    return BoardDocument(cards=[Card(id=c, name=f"Card {c}") for c in card_ids], actions=list(actions))


@pytest.fixture
def raw_board():
    """A Trello export: Mon 2024-01-01 09:00 and Tue 2024-01-02 14:00 on c1."""
    return {
        "id": "b1",
        "name": "Thesis",
        "cards": [
            {"id": "c1", "name": "Write chapter 1"},
            {"id": "c2", "name": "Read papers"},
        ],
        "actions": [
            comment("Pomodoro #3", "c1", "2024-01-02T14:00:00.000Z"),
            {
                "id": "a-move",
                "type": "updateCard",
                "date": "2024-01-02T13:00:00.000Z",
                "data": {"card": {"id": "c1"}, "listAfter": {"name": "Doing"}},
            },
            comment("Looks good", "c2", "2024-01-01T12:00:00.000Z"),
            comment("Pomodoro #1", "c1", "2024-01-01T09:00:00.000Z"),
        ],
        "checklists": [],
        "members": [{"fullName": "Test User"}],
    }


@pytest.fixture
def board_file(tmp_path, raw_board):
    path = tmp_path / "board.json"
    path.write_text(json.dumps(raw_board))
    return path
