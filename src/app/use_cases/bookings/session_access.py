from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Session


async def load_session_for_participant(
    uow: UnitOfWork, session_id: UUID, user_id: UUID, mentor_only: bool = False
) -> Result[Session]:
    """
    Load a session the user takes part in.

    Errors:
        SESSION_NOT_FOUND: no such session
        FORBIDDEN: the user is not a participant (or not the mentor when mentor_only)
    """
    session = await uow.sessions.get_by_id(session_id)
    if session is None:
        return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

    if mentor_only:
        if session.mentor_id != user_id:
            return Return.err(
                Error("FORBIDDEN", "Only the session's mentor can perform this action")
            )
    elif user_id not in (session.student_id, session.mentor_id):
        return Return.err(Error("FORBIDDEN", "You are not a participant of this session"))

    return Return.ok(session)
