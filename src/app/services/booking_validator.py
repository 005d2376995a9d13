"""
Booking Validator

Decides whether a proposed booking may proceed, using live data: the slot
must still be generated from the mentor's availability and must not overlap
any non-cancelled session at the time of the check.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import MentorProfile, SessionType, User, UserRole
from src.domain.scheduling import (
    BookingPolicy,
    TimeSlot,
    find_slot,
    generate_slots,
    to_naive_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

MAX_SUBJECT_LENGTH = 200
MAX_NOTES_LENGTH = 1000


@dataclass
class ValidatedBooking:
    student: User
    mentor: User
    profile: MentorProfile
    slot: TimeSlot
    session_type: SessionType
    subject: str


class BookingValidator:
    """
    Validation order:
    1. Required fields (subject, session type, payment method)
    2. Mentor and student exist
    3. Lead time
    4. Slot still offered by the mentor's availability
    5. No overlapping non-cancelled session
    """

    def __init__(self, uow: UnitOfWork, policy: BookingPolicy = BookingPolicy()):
        self.uow = uow
        self.policy = policy

    async def validate(
        self,
        student_id: UUID,
        mentor_id: UUID,
        scheduled_time: datetime,
        subject: Optional[str],
        session_type: Optional[str] = SessionType.video.value,
        payment_method_id: Optional[str] = None,
        session_notes: Optional[str] = None,
        require_payment_method: bool = True,
        exclude_session_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> Result[ValidatedBooking]:
        now = now or utcnow()
        scheduled_time = to_naive_utc(scheduled_time)

        subject = (subject or "").strip()
        if not subject:
            return Return.err(Error("VALIDATION_ERROR", "Subject is required"))
        if len(subject) > MAX_SUBJECT_LENGTH:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Subject must be at most {MAX_SUBJECT_LENGTH} characters",
                )
            )

        try:
            parsed_type = SessionType(session_type)
        except ValueError:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "Session type must be one of: video, audio, in-person",
                )
            )

        if require_payment_method and not (payment_method_id or "").strip():
            return Return.err(Error("VALIDATION_ERROR", "Payment method is required"))

        if session_notes and len(session_notes) > MAX_NOTES_LENGTH:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Session notes must be at most {MAX_NOTES_LENGTH} characters",
                )
            )

        mentor = await self.uow.users.get_by_id(mentor_id)
        if mentor is None or mentor.role != UserRole.mentor:
            return Return.err(Error("MENTOR_NOT_FOUND", "Mentor not found"))
        profile = await self.uow.mentor_profiles.get_by_user_id(mentor_id)
        if profile is None:
            return Return.err(Error("MENTOR_NOT_FOUND", "Mentor profile not found"))

        student = await self.uow.users.get_by_id(student_id)
        if student is None:
            return Return.err(Error("STUDENT_NOT_FOUND", "Student not found"))
        if student.id == mentor.id:
            return Return.err(Error("VALIDATION_ERROR", "You cannot book a session with yourself"))

        if scheduled_time - now < self.policy.booking_lead_time:
            hours = self.policy.booking_lead_time_minutes / 60
            return Return.err(
                Error(
                    "LEAD_TIME_VIOLATION",
                    f"Sessions must be booked at least {hours:g} hours in advance",
                )
            )

        slots = generate_slots(
            mentor_id,
            profile.weekly_schedule,
            scheduled_time.date(),
            now,
            hourly_rate=profile.hourly_rate,
            policy=self.policy,
        )
        slot = find_slot(slots, scheduled_time)
        if slot is None:
            return Return.err(
                Error(
                    "SLOT_UNAVAILABLE",
                    "The selected time is not in the mentor's availability",
                )
            )

        conflicts = await self.uow.sessions.find_conflicting(
            mentor_id,
            slot.start_time,
            slot.duration,
            exclude_session_id=exclude_session_id,
        )
        if conflicts:
            logger.info(
                f"Slot {slot.id} rejected: overlaps session(s) "
                f"{', '.join(str(s.id) for s in conflicts)}"
            )
            return Return.err(
                Error("SLOT_CONFLICT", "This time slot is no longer available")
            )

        return Return.ok(
            ValidatedBooking(
                student=student,
                mentor=mentor,
                profile=profile,
                slot=slot,
                session_type=parsed_type,
                subject=subject,
            )
        )
