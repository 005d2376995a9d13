"""
Cancel Booking Use Case

A student or mentor cancels a pending or confirmed session.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CancelledBy

from .dtos import BookingResponse
from .session_access import load_session_for_participant


class CancelBookingUseCase:
    """
    Business Rules:
    - Only participants may cancel
    - Only pending_mentor_acceptance and confirmed sessions can be cancelled
    - Paid sessions are refunded; a failed refund is recorded, not raised
    """

    def __init__(self, uow: UnitOfWork, lifecycle: SessionLifecycleManager):
        self.uow = uow
        self.lifecycle = lifecycle

    async def execute(
        self, session_id: UUID, user_id: UUID, reason: Optional[str] = None
    ) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(self.uow, session_id, user_id)
            if loaded.is_err():
                return loaded
            session = loaded.value

            cancelled_by = (
                CancelledBy.student if session.student_id == user_id else CancelledBy.mentor
            )
            result = await self.lifecycle.cancel(
                session,
                cancelled_by=cancelled_by,
                reason=reason or "No reason provided",
                actor_id=user_id,
            )
            if result.is_err():
                return result
            return Return.ok(BookingResponse.from_session(result.value))
