"""Tests for loading Trello board exports."""

import json
from datetime import timezone

import pytest

from pomostats.analyze import analyze_board
from pomostats.ingest import board_from_dict, load_board, parse_timestamp
from pomostats.models import InvalidBoardError


def test_board_from_dict(raw_board):
    board = board_from_dict(raw_board)
    assert board.name == "Thesis"
    assert [c.id for c in board.cards] == ["c1", "c2"]
    assert board.cards[0].name == "Write chapter 1"
    assert [a.type for a in board.actions] == ["commentCard", "updateCard", "commentCard", "commentCard"]


def test_board_from_dict_keeps_action_order(raw_board):
    board = board_from_dict(raw_board)
    assert [a.text for a in board.actions] == ["Pomodoro #3", "", "Looks good", "Pomodoro #1"]
    assert board.actions[0].card_id == "c1"


def test_cards_start_unannotated(raw_board):
    board = board_from_dict(raw_board)
    assert all(c.pomodoro_events is None and c.pomodoro_total is None for c in board.cards)


def test_parse_timestamp_z_suffix():
    ts = parse_timestamp("2024-01-02T14:00:00.000Z")
    assert ts.tzinfo is not None
    assert ts.utcoffset().total_seconds() == 0
    assert (ts.hour, ts.day) == (14, 2)


def test_parse_timestamp_naive_is_utc():
    assert parse_timestamp("2024-01-02T14:00:00").tzinfo is timezone.utc


@pytest.mark.parametrize("value", [None, "", "yesterday"])
def test_parse_timestamp_invalid(value):
    with pytest.raises(InvalidBoardError):
        parse_timestamp(value)


@pytest.mark.parametrize("missing", ["cards", "actions"])
def test_missing_lists_are_invalid(raw_board, missing):
    del raw_board[missing]
    with pytest.raises(InvalidBoardError, match=missing):
        board_from_dict(raw_board)


def test_card_without_id_is_invalid(raw_board):
    raw_board["cards"].append({"name": "orphan"})
    with pytest.raises(InvalidBoardError):
        board_from_dict(raw_board)


def test_action_without_card(raw_board):
    raw_board["actions"].append({"type": "addMemberToBoard", "date": "2024-01-03T10:00:00Z", "data": {}})
    board = board_from_dict(raw_board)
    assert board.actions[-1].card_id is None


def test_action_without_date_is_dropped(raw_board):
    raw_board["actions"].append({"type": "updateCard", "data": {"card": {"id": "c1"}}})
    board = board_from_dict(raw_board)
    assert len(board.actions) == 4
    stats = analyze_board(board, timezone.utc)
    assert stats.total_pomodoros == 3


def test_malformed_action_payloads_are_tolerated(raw_board):
    raw_board["actions"].extend([
        {"type": "updateCard", "date": "2024-01-03T10:00:00Z", "data": "x"},
        {"type": "commentCard", "date": "2024-01-03T10:00:00Z", "data": {"text": 5, "card": "c1"}},
        {"type": None, "date": "2024-01-03T10:00:00Z"},
        "not an action",
    ])
    board = board_from_dict(raw_board)
    assert len(board.actions) == 7
    assert board.actions[4].text == ""
    assert board.actions[5].text == ""
    assert board.actions[5].card_id is None
    assert board.actions[6].type == ""
    stats = analyze_board(board, timezone.utc)
    assert stats.total_pomodoros == 3
    assert stats.weekday_counts[1] == 2


def test_load_board(board_file):
    board = load_board(str(board_file))
    assert board.name == "Thesis"
    assert len(board.cards) == 2
    assert len(board.actions) == 4


def test_load_board_not_json(tmp_path):
    path = tmp_path / "board.json"
    path.write_text("{not json")
    with pytest.raises(InvalidBoardError):
        load_board(str(path))


def test_load_board_missing_actions(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps({"name": "x", "cards": []}))
    with pytest.raises(InvalidBoardError, match="actions"):
        load_board(str(path))
