"""Tests for cli/tui.py input parsing."""

from cli.tui import parse_new_habit


def test_parse_new_habit_with_time():
    draft = parse_new_habit("Read 20 pages @21:30")
    assert draft.name == "Read 20 pages"
    assert draft.reminder_time == "21:30"


def test_parse_new_habit_pads_hour():
    assert parse_new_habit("Stretch @7:05").reminder_time == "07:05"


def test_parse_new_habit_without_time():
    draft = parse_new_habit("Floss")
    assert draft.name == "Floss"
    assert draft.reminder_time == ""


def test_parse_new_habit_out_of_range_time_dropped():
    draft = parse_new_habit("Nap @25:00")
    assert draft.name == "Nap"
    assert draft.reminder_time == ""
