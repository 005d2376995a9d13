from datetime import datetime, timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SessionStatus
from src.domain.scheduling import utcnow

from .dtos import MonitoringStatsResponse

NEAR_AUTO_DECLINE_WINDOW = timedelta(hours=1)


class GetMonitoringStatsUseCase:
    """Counts of pending, soon-to-expire and link-less confirmed sessions"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        is_running: bool,
        interval_seconds: int,
        now: Optional[datetime] = None,
    ) -> Result[MonitoringStatsResponse]:
        now = now or utcnow()
        async with self.uow:
            pending = await self.uow.sessions.count_by_status(
                SessionStatus.pending_mentor_acceptance
            )
            near = await self.uow.sessions.count_pending_auto_declining_between(
                now, now + NEAR_AUTO_DECLINE_WINDOW
            )
            without_link = await self.uow.sessions.count_confirmed_without_meeting_link()

            return Return.ok(
                MonitoringStatsResponse(
                    is_running=is_running,
                    interval_seconds=interval_seconds,
                    pending_sessions=pending,
                    sessions_near_auto_decline=near,
                    confirmed_without_meeting_link=without_link,
                )
            )
