from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, SessionStatus

from .dtos import BookingResponse
from .session_access import load_session_for_participant


class RateSessionUseCase:
    """
    Attach a participant's rating (1-5) and optional review to a completed session.

    Each party rates once.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        session_id: UUID,
        user_id: UUID,
        rating: int,
        review: Optional[str] = None,
    ) -> Result[BookingResponse]:
        async with self.uow:
            loaded = await load_session_for_participant(self.uow, session_id, user_id)
            if loaded.is_err():
                return loaded
            session = loaded.value

            if session.status != SessionStatus.completed:
                return Return.err(
                    Error("SESSION_NOT_COMPLETED", "Only completed sessions can be rated")
                )

            by_student = session.student_id == user_id
            existing = session.student_rating if by_student else session.mentor_rating
            if existing is not None:
                return Return.err(Error("ALREADY_RATED", "You have already rated this session"))

            try:
                session.rate(by_student, rating, review)
            except ValueError as e:
                return Return.err(Error("VALIDATION_ERROR", str(e)))

            await self.uow.sessions.update(session)
            await self.uow.audit_events.create(
                AuditEvent(
                    session_id=session.id,
                    actor_id=user_id,
                    action="session_rated",
                    event_metadata={
                        "by": "student" if by_student else "mentor",
                        "rating": rating,
                    },
                )
            )
            await self.uow.commit()

            return Return.ok(BookingResponse.from_session(session))
