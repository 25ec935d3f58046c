from __future__ import annotations

from datetime import date, datetime, time, timedelta

from core.timestamps import carries_date, parse_date, parse_slack_timestamp


def test_parse_date_shapes() -> None:
    assert parse_date("March 15, 2024") == date(2024, 3, 15)
    assert parse_date("Friday, March 15th, 2024") == date(2024, 3, 15)
    assert parse_date("2024-03-15") == date(2024, 3, 15)
    assert parse_date("Sept 3") == date(date.today().year, 9, 3)
    assert parse_date("Today") == date.today()
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_date_rejects_garbage_and_rollover() -> None:
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("not a date") is None
    assert parse_date("Feb 30, 2024") is None


def test_clock_times_land_on_context_day() -> None:
    context = date(2024, 3, 15)
    assert parse_slack_timestamp("10:30 AM", context) == datetime(2024, 3, 15, 10, 30)
    assert parse_slack_timestamp("12:05 AM", context) == datetime(2024, 3, 15, 0, 5)
    assert parse_slack_timestamp("12:05 PM", context) == datetime(2024, 3, 15, 12, 5)
    assert parse_slack_timestamp("14:05", context) == datetime(2024, 3, 15, 14, 5)
    assert parse_slack_timestamp("9:15:30 pm", context) == datetime(2024, 3, 15, 21, 15, 30)


def test_clock_time_without_context_uses_today() -> None:
    assert parse_slack_timestamp("10:30 AM") == datetime.combine(date.today(), time(10, 30))


def test_relative_and_dated_timestamps() -> None:
    yesterday = date.today() - timedelta(days=1)
    assert parse_slack_timestamp("Yesterday at 9:15 AM") == datetime.combine(yesterday, time(9, 15))
    assert parse_slack_timestamp("Mar 5th at 9:00 PM", date(2023, 6, 1)) == datetime(2023, 3, 5, 21, 0)
    assert parse_slack_timestamp("March 5, 2022") == datetime(2022, 3, 5)

    monday = parse_slack_timestamp("Monday at 8:00 AM")
    assert monday is not None
    assert monday.weekday() == 0
    assert monday.date() < date.today()


def test_linked_and_iso_timestamps() -> None:
    linked = "[10:30 AM](https://workspace.slack.com/archives/C01/p1710000000)"
    assert parse_slack_timestamp(linked, date(2024, 3, 15)) == datetime(2024, 3, 15, 10, 30)
    assert parse_slack_timestamp("2024-03-15T10:30:00+00:00") == datetime(2024, 3, 15, 10, 30)


def test_unparsable_timestamps_return_none() -> None:
    assert parse_slack_timestamp("😄garbled") is None
    assert parse_slack_timestamp("13:00 PM") is None
    assert parse_slack_timestamp("") is None
    assert parse_slack_timestamp("Smarch 5") is None


def test_carries_date() -> None:
    assert carries_date("10:30 AM") is False
    assert carries_date("[10:30](https://workspace.slack.com/archives/C01/p1)") is False
    assert carries_date("Mar 5 at 9:00 AM") is True
    assert carries_date("") is False
