from datetime import datetime, timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.scheduling import utcnow

from .dtos import NearAutoDeclineResponse, NearAutoDeclineSession


class GetSessionsNearAutoDeclineUseCase:
    """Pending sessions whose acceptance deadline falls within the next minutes_ahead"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, minutes_ahead: int = 60, now: Optional[datetime] = None
    ) -> Result[NearAutoDeclineResponse]:
        if minutes_ahead <= 0:
            return Return.err(Error("VALIDATION_ERROR", "minutes_ahead must be positive"))

        now = now or utcnow()
        async with self.uow:
            sessions = await self.uow.sessions.get_pending_auto_declining_between(
                now, now + timedelta(minutes=minutes_ahead)
            )
            items = [
                NearAutoDeclineSession(
                    id=str(s.id),
                    mentor_id=str(s.mentor_id),
                    student_id=str(s.student_id),
                    subject=s.subject,
                    scheduled_time=s.scheduled_time,
                    auto_decline_at=s.auto_decline_at,
                    minutes_until_auto_decline=int(
                        (s.auto_decline_at - now).total_seconds() // 60
                    ),
                )
                for s in sessions
            ]
            return Return.ok(
                NearAutoDeclineResponse(
                    minutes_ahead=minutes_ahead, count=len(items), sessions=items
                )
            )
