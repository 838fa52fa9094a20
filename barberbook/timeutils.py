# barberbook/timeutils.py

import re
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .errors import ConfigurationError, InvalidArgument

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"([0-9]{2}):([0-9]{2})")


class Weekday(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        # date.weekday(): 0 = Monday ... 6 = Sunday, same order as WEEKDAYS
        return WEEKDAYS[day.weekday()]


WEEKDAYS = tuple(Weekday)


def parse_hhmm(value: str) -> int:
    """Minutes since midnight, e.g. "09:30" -> 570."""
    if not isinstance(value, str):
        raise InvalidArgument(f"Expected HH:MM string, got {value!r}")
    match = _HHMM.fullmatch(value)
    if match is None:
        raise InvalidArgument(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidArgument(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidArgument(f"{minutes} is not a time of day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_since(day: date, moment: datetime) -> int:
    """Offset of `moment` from midnight of `day`.

    Negative for earlier dates and >= 1440 for later ones, so appointments on
    other days never land inside a working window.
    """
    midnight = datetime.combine(day, time.min, tzinfo=moment.tzinfo)
    return int((moment - midnight) // timedelta(minutes=1))


def at_minutes(day: date, minutes: int) -> datetime:
    return datetime.combine(day, time.min) + timedelta(minutes=minutes)


def day_window(working_hours: Optional[Mapping[str, Any]], day: date) -> Optional[Tuple[int, int]]:
    """Opening and closing offsets for `day`, or None when closed.

    `working_hours` is the persisted record keyed by weekday name, each value
    {"start": "HH:MM", "end": "HH:MM", "enabled": bool}. Raises
    ConfigurationError when the entry for that weekday is malformed.
    """
    if not working_hours:
        return None
    weekday = Weekday.from_date(day).value
    entry = working_hours.get(weekday)
    if entry is None:
        return None
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Working hours for {weekday} are not a record")
    if not entry.get("enabled", False):
        return None

    try:
        start = parse_hhmm(entry.get("start"))
        end = parse_hhmm(entry.get("end"))
    except InvalidArgument as exc:
        raise ConfigurationError(f"Working hours for {weekday}: {exc}") from exc
    if start >= end:
        raise ConfigurationError(f"Working hours for {weekday} close before they open")
    return start, end
