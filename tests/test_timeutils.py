from datetime import date, datetime, timedelta

import pytest

from barberbook.errors import ConfigurationError, InvalidArgument
from barberbook.timeutils import Weekday, day_window, format_hhmm, minutes_since, parse_hhmm

from conftest import MONDAY, week


def test_weekday_follows_calendar_not_locale():
    names = [Weekday.from_date(MONDAY + timedelta(days=offset)).value for offset in range(7)]
    assert names == ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
    assert Weekday.from_date(date(2024, 2, 29)) is Weekday.thursday


def test_parse_and_format_hhmm():
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("09:30") == 570
    assert parse_hhmm("23:59") == 1439
    assert format_hhmm(570) == "09:30"
    assert format_hhmm(0) == "00:00"


@pytest.mark.parametrize(
    "value",
    ["9:00", "24:00", "12:60", "ab:cd", "", None, 930, "09:00\n", " 09:00", "０９:００", "09:00:00"],
)
def test_parse_hhmm_rejects_malformed(value):
    with pytest.raises(InvalidArgument):
        parse_hhmm(value)


def test_format_hhmm_rejects_out_of_day():
    with pytest.raises(InvalidArgument):
        format_hhmm(24 * 60)
    with pytest.raises(InvalidArgument):
        format_hhmm(-1)


def test_minutes_since_is_relative_to_the_day():
    assert minutes_since(MONDAY, datetime(2024, 1, 1, 10, 15)) == 615
    assert minutes_since(MONDAY, datetime(2024, 1, 2, 0, 30)) == 24 * 60 + 30
    assert minutes_since(MONDAY, datetime(2023, 12, 31, 23, 0)) == -60


def test_day_window():
    hours = week(monday={"start": "09:00", "end": "13:00", "enabled": True})
    assert day_window(hours, MONDAY) == (540, 780)
    # disabled
    assert day_window(hours, MONDAY + timedelta(days=1)) is None
    # missing entry or missing table
    assert day_window({"tuesday": hours["tuesday"]}, MONDAY) is None
    assert day_window(None, MONDAY) is None


def test_day_window_malformed_entry():
    with pytest.raises(ConfigurationError):
        day_window({"monday": {"start": "13:00", "end": "09:00", "enabled": True}}, MONDAY)
    with pytest.raises(ConfigurationError):
        day_window({"monday": {"start": "9h", "end": "18:00", "enabled": True}}, MONDAY)
    with pytest.raises(ConfigurationError):
        day_window({"monday": "09:00-18:00"}, MONDAY)


def test_day_window_ignores_bad_times_on_disabled_days():
    assert day_window({"monday": {"start": "", "end": "", "enabled": False}}, MONDAY) is None
