from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CancelledBy, SessionStatus

from .dtos import ManualDeclineResponse


class ManualDeclineSessionUseCase:
    """
    Operator force-cancels a session still awaiting mentor acceptance.

    Uses the same cancel transition (and refund) as the automatic sweep.
    """

    def __init__(self, uow: UnitOfWork, lifecycle: SessionLifecycleManager):
        self.uow = uow
        self.lifecycle = lifecycle

    async def execute(self, session_id: UUID, reason: str) -> Result[ManualDeclineResponse]:
        reason = (reason or "").strip()
        if not reason:
            return Return.err(Error("VALIDATION_ERROR", "Reason is required"))

        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
            if session.status != SessionStatus.pending_mentor_acceptance:
                return Return.err(
                    Error(
                        "INVALID_STATUS_TRANSITION",
                        "Only sessions awaiting mentor acceptance can be declined",
                    )
                )

            result = await self.lifecycle.cancel(
                session,
                cancelled_by=CancelledBy.system,
                reason=f"Manually cancelled: {reason}",
                expected=(SessionStatus.pending_mentor_acceptance,),
                action="session_auto_declined",
                automatic=True,
            )
            if result.is_err():
                return result

            declined = result.value
            return Return.ok(
                ManualDeclineResponse(
                    id=str(declined.id),
                    status=declined.status.value,
                    cancellation_reason=declined.cancellation_reason,
                    refund_status=declined.refund_status.value if declined.refund_status else None,
                )
            )
