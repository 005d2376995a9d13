"""
Audit API Routes

Handles session audit trail retrieval.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.api.error import raise_for_error
from src.api.routes.bookings import current_user_id
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import GetSessionAuditTrailUseCase
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/bookings", tags=["Audit"])


class AuditEventResponse(BaseModel):
    """Single audit event in response"""

    action: str
    actor_email: Optional[str]
    timestamp: str
    metadata: Dict[str, Any]


class SessionAuditTrailResponse(BaseModel):
    """GET /bookings/{session_id}/history response payload"""

    session_id: str
    events: List[AuditEventResponse]


@router.get(
    "/{session_id}/history",
    status_code=status.HTTP_200_OK,
    response_model=SessionAuditTrailResponse,
)
async def get_session_history(
    session_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Session Audit Trail

    Returns every recorded lifecycle event of the session, oldest first.
    Only accessible by the session's student and mentor.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: caller is not a participant
        - 404 Not Found: SESSION_NOT_FOUND
    """
    use_case = GetSessionAuditTrailUseCase(uow)
    result = await use_case.execute(session_id, current_user_id(current_user))

    if result.is_err():
        raise_for_error(result.error)

    return result.value
