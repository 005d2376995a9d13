from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import BookingResponse
from .session_access import load_session_for_participant


class GetBookingDetailsUseCase:
    """Session details, visible to its two participants only"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: UUID, user_id: UUID) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(self.uow, session_id, user_id)
            if loaded.is_err():
                return loaded
            return Return.ok(BookingResponse.from_session(loaded.value))
