"""
Slot scheduling

Pure functions turning a mentor's recurring weekly availability into bookable
slots for a given date, and flagging slots that collide with existing sessions.

All datetimes are naive UTC. Intervals are half-open: [start, end).
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Iterable, List, Optional, Protocol, Tuple
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities.enums import SessionType

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

MIN_SESSION_MINUTES = 15
MAX_SESSION_MINUTES = 180

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class BookingPolicy:
    """Timing and pricing rules applied when offering and committing slots"""

    slot_duration_minutes: int = 60
    slot_lead_buffer_minutes: int = 30
    booking_lead_time_minutes: int = 120
    default_hourly_rate: float = 50.0
    default_currency: str = "INR"

    @property
    def slot_duration(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)

    @property
    def slot_lead_buffer(self) -> timedelta:
        return timedelta(minutes=self.slot_lead_buffer_minutes)

    @property
    def booking_lead_time(self) -> timedelta:
        return timedelta(minutes=self.booking_lead_time_minutes)


class TimeSlot(BaseModel):
    """A candidate bookable interval derived from weekly availability"""

    id: str
    start_time: datetime
    end_time: datetime
    date: str
    is_available: bool = True
    price: float
    duration: int
    session_type: SessionType = SessionType.video


class ScheduledInterval(Protocol):
    scheduled_time: datetime

    @property
    def end_time(self) -> datetime: ...


def utcnow() -> datetime:
    """Current time as naive UTC, matching how datetimes are stored"""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap: back-to-back intervals do not conflict."""
    return a_start < b_end and b_start < a_end


def weekday_name(target_date: date) -> str:
    return WEEKDAY_NAMES[target_date.weekday()]


def make_slot_id(mentor_id: UUID, start: datetime) -> str:
    epoch_ms = int(start.replace(tzinfo=UTC).timestamp() * 1000)
    return f"{mentor_id}-{epoch_ms}"


def parse_hhmm(value) -> Optional[time]:
    """Parse "HH:MM" into a time, or None when malformed."""
    if not isinstance(value, str):
        return None
    match = _HHMM.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def day_bounds(target_date: date) -> Tuple[datetime, datetime]:
    """[start of day, start of next day)"""
    start = datetime.combine(target_date, time.min)
    return start, start + timedelta(days=1)


def conflict_window(target_date: date) -> Tuple[datetime, datetime]:
    """
    Range of scheduled_time values that can intersect target_date.

    Widened backwards by the longest allowed session so a session that starts
    the previous evening and runs past midnight is still considered.
    """
    start, end = day_bounds(target_date)
    return start - timedelta(minutes=MAX_SESSION_MINUTES), end


def generate_slots(
    mentor_id: UUID,
    weekly_schedule: Optional[dict],
    target_date: date,
    now: datetime,
    hourly_rate: Optional[float] = None,
    policy: BookingPolicy = BookingPolicy(),
) -> List[TimeSlot]:
    """
    Generate fixed-length slots for target_date from a weekly schedule.

    A missing or empty day yields no slots. Blocks that are unavailable,
    unparseable or inverted are skipped. Slots starting less than the lead
    buffer after `now` are dropped.
    """
    day = weekday_name(target_date)
    blocks = (weekly_schedule or {}).get(day) or []
    if not isinstance(blocks, list) or not blocks:
        logger.debug(f"No availability for mentor {mentor_id} on {day}")
        return []

    price = hourly_rate if hourly_rate is not None else policy.default_hourly_rate
    earliest_start = now + policy.slot_lead_buffer
    step = policy.slot_duration
    slots: List[TimeSlot] = []

    for index, block in enumerate(blocks):
        if not isinstance(block, dict) or not block.get("isAvailable"):
            continue

        start_of_block = parse_hhmm(block.get("startTime"))
        end_of_block = parse_hhmm(block.get("endTime"))
        if start_of_block is None or end_of_block is None:
            logger.warning(
                f"Skipping block {index} on {day} for mentor {mentor_id}: invalid time format"
            )
            continue
        if start_of_block >= end_of_block:
            logger.warning(
                f"Skipping block {index} on {day} for mentor {mentor_id}: "
                f"start {block.get('startTime')} is not before end {block.get('endTime')}"
            )
            continue

        block_start = datetime.combine(target_date, start_of_block)
        block_end = datetime.combine(target_date, end_of_block)

        cursor = block_start
        while cursor + step <= block_end:
            if cursor >= earliest_start:
                slots.append(
                    TimeSlot(
                        id=make_slot_id(mentor_id, cursor),
                        start_time=cursor,
                        end_time=cursor + step,
                        date=target_date.isoformat(),
                        is_available=True,
                        price=price,
                        duration=policy.slot_duration_minutes,
                        session_type=SessionType.video,
                    )
                )
            cursor += step

    return slots


def filter_conflicts(
    slots: Iterable[TimeSlot], sessions: Iterable[ScheduledInterval]
) -> List[TimeSlot]:
    """
    Flag slots overlapping any of the given sessions as unavailable.

    Slots are never dropped. The caller passes only non-cancelled sessions.
    """
    busy = [(s.scheduled_time, s.end_time) for s in sessions]
    flagged = []
    for slot in slots:
        taken = any(
            intervals_overlap(slot.start_time, slot.end_time, start, end)
            for start, end in busy
        )
        flagged.append(slot.model_copy(update={"is_available": not taken}))
    return flagged


def find_slot(slots: Iterable[TimeSlot], start_time: datetime) -> Optional[TimeSlot]:
    for slot in slots:
        if slot.start_time == start_time:
            return slot
    return None
