# barberbook/core.py

import logging
from datetime import date
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import ConfigurationError, InvalidArgument
from .timeutils import day_window, format_hhmm, minutes_since

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 30


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    cancelled = "cancelled"
    completed = "completed"


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    # half-open intervals: touching ends don't overlap
    return start_a < end_b and end_a > start_b


def _positive_minutes(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer number of minutes, got {value!r}")
    return value


def busy_intervals(day: date, appointments: Iterable[Any]) -> List[Tuple[int, int]]:
    """Minute intervals, relative to `day`, blocked by non-cancelled appointments."""
    intervals = []
    for appt in appointments:
        if getattr(appt, "status", None) == AppointmentStatus.cancelled.value:
            continue
        intervals.append((minutes_since(day, appt.start_time), minutes_since(day, appt.end_time)))
    return intervals


def grid_starts(window: Tuple[int, int], duration: int, slot_minutes: int) -> List[int]:
    """Grid candidates from opening time whose end falls strictly before closing."""
    window_start, window_end = window
    return [
        start
        for start in range(window_start, window_end, slot_minutes)
        if start + duration < window_end
    ]


def compute_available_slots(
    day: date,
    working_hours: Optional[Mapping[str, Any]],
    service: Any,
    existing_appointments: Iterable[Any] = (),
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
) -> List[str]:
    """Bookable start times ("HH:MM", ascending) for `service` on `day`.

    Candidates sit on a fixed `slot_minutes` grid starting at opening time,
    whatever the service duration. A candidate survives when it ends strictly
    before closing and doesn't overlap any non-cancelled appointment.
    Appointments are expected to be pre-filtered by establishment; ones on
    other dates fall outside the window and are ignored.

    Returns an empty list when the establishment is closed that day, including
    when its working hours for the weekday are malformed.
    """
    duration = _positive_minutes(getattr(service, "duration_minutes", None), "service duration")
    slot_minutes = _positive_minutes(slot_minutes, "slot_minutes")

    try:
        window = day_window(working_hours, day)
    except ConfigurationError as exc:
        logger.warning(f"Treating {day.isoformat()} as closed: {exc}")
        return []
    if window is None:
        return []

    busy = busy_intervals(day, existing_appointments)

    available = []
    for start in grid_starts(window, duration, slot_minutes):
        end = start + duration
        if any(overlaps(start, end, busy_start, busy_end) for busy_start, busy_end in busy):
            continue
        available.append(format_hhmm(start))
    return available
