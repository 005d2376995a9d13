"""
Reschedule Booking Use Case

Moves a pending booking to another free slot of the same mentor.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.booking_validator import BookingValidator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, SessionStatus
from src.domain.entities.session import compute_auto_decline_at
from src.domain.scheduling import BookingPolicy

from .dtos import BookingResponse
from .session_access import load_session_for_participant

logger = logging.getLogger(__name__)


class RescheduleBookingUseCase:
    """
    Business Rules:
    - Only the student who booked may reschedule
    - Only sessions still pending mentor acceptance can move
    - The new slot is validated exactly like a new booking (lead time,
      availability, conflicts), ignoring the session being moved
    - auto_decline_at is re-derived from the new scheduled_time
    - Price and payment are unchanged
    """

    def __init__(self, uow: UnitOfWork, policy: BookingPolicy = BookingPolicy()):
        self.uow = uow
        self.validator = BookingValidator(uow, policy)

    async def execute(
        self,
        session_id: UUID,
        student_id: UUID,
        new_scheduled_time: datetime,
        now: Optional[datetime] = None,
    ) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(self.uow, session_id, student_id)
            if loaded.is_err():
                return loaded
            session = loaded.value

            if session.student_id != student_id:
                return Return.err(
                    Error("FORBIDDEN", "Only the student who booked can reschedule")
                )
            if session.status != SessionStatus.pending_mentor_acceptance:
                return Return.err(
                    Error(
                        "INVALID_STATUS_TRANSITION",
                        "Only sessions awaiting mentor acceptance can be rescheduled",
                    )
                )

            validation = await self.validator.validate(
                student_id=student_id,
                mentor_id=session.mentor_id,
                scheduled_time=new_scheduled_time,
                subject=session.subject,
                session_type=session.session_type,
                require_payment_method=False,
                exclude_session_id=session.id,
                now=now,
            )
            if validation.is_err():
                return validation
            slot = validation.value.slot
            previous_time = session.scheduled_time

            try:
                moved = await self.uow.sessions.transition_status(
                    session.id,
                    (SessionStatus.pending_mentor_acceptance,),
                    {
                        "scheduled_time": slot.start_time,
                        "slot_id": slot.id,
                        "auto_decline_at": compute_auto_decline_at(slot.start_time),
                    },
                )
            except IntegrityError:
                await self.uow.rollback()
                logger.warning(f"Write conflict rescheduling session {session.id} to {slot.id}")
                return Return.err(
                    Error("SLOT_CONFLICT", "This time slot was just booked by someone else")
                )

            if not moved:
                return Return.err(
                    Error(
                        "INVALID_STATUS_TRANSITION",
                        "Only sessions awaiting mentor acceptance can be rescheduled",
                    )
                )

            session.reschedule(slot.start_time, slot.id)

            await self.uow.audit_events.create(
                AuditEvent(
                    session_id=session.id,
                    actor_id=student_id,
                    action="booking_rescheduled",
                    event_metadata={
                        "from": previous_time.isoformat(),
                        "to": slot.start_time.isoformat(),
                    },
                )
            )
            await self.uow.commit()

            logger.info(f"Session {session.id} rescheduled to {slot.start_time.isoformat()}")
            return Return.ok(BookingResponse.from_session(session))
