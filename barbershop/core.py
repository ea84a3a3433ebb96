# barbershop/core.py
"""Slot arithmetic shared by the availability endpoint and the booking flow.

Everything here is pure: callers load appointments and absences from the
database and pass them in, together with the instant they consider "now".
"""

from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import Iterable, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from .config import get_settings

DAY_END = time(23, 59, 59, 999999)


class BookedInterval(Protocol):
    barber_id: int
    service_id: int
    starts_at: datetime
    duration_minutes: Optional[int]
    is_active: bool


class AbsenceWindow(Protocol):
    barber_id: int
    start_at: datetime
    end_at: datetime


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    # half-open intervals: touching endpoints do not overlap
    return start_a < end_b and start_b < end_a


def to_time_label(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_minutes(label: str) -> int:
    hours, mins = label.split(":")
    return int(hours) * 60 + int(mins)


@lru_cache(maxsize=256)
def _slot_labels(open_minutes: int, close_minutes: int, duration_minutes: int) -> tuple:
    if duration_minutes <= 0 or open_minutes >= close_minutes:
        return ()
    labels = []
    current = open_minutes
    while current + duration_minutes <= close_minutes:
        labels.append(to_time_label(current))
        current += duration_minutes
    return tuple(labels)


def generate_slots(open_minutes: int, close_minutes: int, duration_minutes: int) -> list[str]:
    """Return "HH:MM" start labels stepping by the service duration.

    The last slot must end at or before closing time.
    """
    return list(_slot_labels(open_minutes, close_minutes, duration_minutes))


def appointment_end(
    appointment: BookedInterval,
    durations: Mapping[int, int],
    fallback_minutes: int,
) -> datetime:
    minutes = appointment.duration_minutes
    if minutes is None:
        minutes = durations.get(appointment.service_id, fallback_minutes)
    return appointment.starts_at + timedelta(minutes=minutes)


def available_slots(
    day: Optional[date],
    barber_id: Optional[int],
    duration_minutes: int,
    appointments: Iterable[BookedInterval],
    absences: Iterable[AbsenceWindow],
    now: datetime,
    durations: Optional[Mapping[int, int]] = None,
    open_minutes: Optional[int] = None,
    close_minutes: Optional[int] = None,
) -> list[str]:
    """Start labels on ``day`` that ``barber_id`` can still take.

    ``durations`` maps service id to its current duration and is used for
    appointments booked before durations were stored on the appointment.
    Without a barber or a day there is nothing to offer.
    """
    if day is None or barber_id is None:
        return []

    if open_minutes is None or close_minutes is None:
        settings = get_settings()
        open_minutes = settings.open_minutes if open_minutes is None else open_minutes
        close_minutes = settings.close_minutes if close_minutes is None else close_minutes

    durations = durations or {}
    day_start = datetime.combine(day, time.min)
    day_end = datetime.combine(day, DAY_END)

    booked = []
    for a in appointments:
        if a.barber_id != barber_id or not a.is_active:
            continue
        booked.append((a.starts_at, appointment_end(a, durations, duration_minutes)))

    blocked = [
        (b.start_at, b.end_at) for b in absences if b.barber_id == barber_id
    ]

    available = []
    for label in generate_slots(open_minutes, close_minutes, duration_minutes):
        slot_start = day_start + timedelta(minutes=to_minutes(label))
        slot_end = slot_start + timedelta(minutes=duration_minutes)

        if slot_start < now:
            continue
        if any(overlaps(slot_start, slot_end, start, end) for start, end in booked):
            continue
        if any(overlaps(slot_start, slot_end, start, end) for start, end in blocked):
            continue
        if slot_start < day_start or slot_end > day_end:
            continue

        available.append(label)

    return available


def to_shop_time(value: datetime, tz_name: str) -> datetime:
    """Convert an offset-aware instant to naive shop-local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def shop_now() -> datetime:
    """Current wall-clock time at the shop, naive like every stored instant."""
    return datetime.now(ZoneInfo(get_settings().timezone)).replace(tzinfo=None)
