"""
Create Booking Use Case

Validates a booking against live availability, charges the student and
creates the pending session.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.booking_validator import BookingValidator
from src.app.services.payment_service import IPaymentService
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Session
from src.domain.scheduling import BookingPolicy

from .dtos import BookingResponse, CreateBookingCommand

logger = logging.getLogger(__name__)


class CreateBookingUseCase:
    """
    Use case for booking a mentor's slot.

    Business Rules:
    - Subject, session type and payment method are required
    - Mentor (with a profile) and student must exist
    - The session must start at least the booking lead time from now
    - The slot must still be offered and free at commit time
    - Paid slots are charged before the session is written; a failed charge
      writes nothing
    - The session starts in pending_mentor_acceptance with
      auto_decline_at = scheduled_time - 2h
    """

    def __init__(
        self,
        uow: UnitOfWork,
        lifecycle: SessionLifecycleManager,
        payment_service: IPaymentService,
        policy: BookingPolicy = BookingPolicy(),
    ):
        self.uow = uow
        self.lifecycle = lifecycle
        self.payment_service = payment_service
        self.validator = BookingValidator(uow, policy)
        self.policy = policy

    async def execute(
        self,
        student_id: UUID,
        command: CreateBookingCommand,
        now: Optional[datetime] = None,
    ) -> Result[BookingResponse]:
        try:
            mentor_id = UUID(command.mentor_id)
        except ValueError:
            return Return.err(Error("VALIDATION_ERROR", "Invalid mentor ID format"))

        async with self.uow:
            validation = await self.validator.validate(
                student_id=student_id,
                mentor_id=mentor_id,
                scheduled_time=command.scheduled_time,
                subject=command.subject,
                session_type=command.session_type,
                payment_method_id=command.payment_method_id,
                session_notes=command.session_notes,
                now=now,
            )
            if validation.is_err():
                return validation
            booking = validation.value
            slot = booking.slot

            currency = booking.profile.currency or self.policy.default_currency
            payment_id = None
            if slot.price > 0:
                charge = await self.payment_service.charge(
                    amount=slot.price,
                    currency=currency,
                    payment_method_id=command.payment_method_id,
                    description=f"Mentoring session: {booking.subject}",
                )
                if not charge.success:
                    logger.warning(
                        f"Charge declined for student {student_id} on slot {slot.id}: {charge.error}"
                    )
                    return Return.err(
                        Error(
                            "PAYMENT_FAILED",
                            "Payment processing failed",
                            reason=charge.error,
                        )
                    )
                payment_id = charge.payment_id

            session = Session.book(
                student_id=student_id,
                mentor_id=mentor_id,
                slot_id=slot.id,
                subject=booking.subject,
                scheduled_time=slot.start_time,
                duration=slot.duration,
                price=slot.price,
                currency=currency,
                payment_id=payment_id,
                session_type=booking.session_type,
                session_notes=command.session_notes,
            )

            result = await self.lifecycle.create(session, actor_id=student_id)
            if result.is_err():
                return result
            return Return.ok(BookingResponse.from_session(result.value))
