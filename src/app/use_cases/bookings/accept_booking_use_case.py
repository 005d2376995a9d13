"""
Accept Booking Use Case

Mentor confirms a pending session by supplying the meeting link, or replaces
the link of a confirmed session.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork

from .dtos import BookingResponse
from .session_access import load_session_for_participant


class AcceptBookingUseCase:
    """
    Business Rules:
    - Only the session's mentor may set the meeting link
    - The link must be an allow-listed meeting URL; otherwise nothing changes
    - pending_mentor_acceptance -> confirmed, mentor_accepted_at set
    - Both parties are notified on confirmation
    """

    def __init__(self, uow: UnitOfWork, lifecycle: SessionLifecycleManager):
        self.uow = uow
        self.lifecycle = lifecycle

    async def execute(
        self, session_id: UUID, mentor_id: UUID, meeting_url: str
    ) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(
                self.uow, session_id, mentor_id, mentor_only=True
            )
            if loaded.is_err():
                return loaded

            result = await self.lifecycle.accept(loaded.value, meeting_url)
            if result.is_err():
                return result
            return Return.ok(BookingResponse.from_session(result.value))
