from uuid import UUID

from libs.result import Result, Return
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork

from .dtos import BookingResponse
from .session_access import load_session_for_participant


class StartSessionUseCase:
    """Mentor marks a confirmed session as in progress"""

    def __init__(self, uow: UnitOfWork, lifecycle: SessionLifecycleManager):
        self.uow = uow
        self.lifecycle = lifecycle

    async def execute(self, session_id: UUID, mentor_id: UUID) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(
                self.uow, session_id, mentor_id, mentor_only=True
            )
            if loaded.is_err():
                return loaded

            result = await self.lifecycle.start(loaded.value)
            if result.is_err():
                return result
            return Return.ok(BookingResponse.from_session(result.value))
