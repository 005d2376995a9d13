"""
Auto-Decline Overdue Sessions Use Case

One check cycle of the session monitor.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CancelledBy, SessionStatus
from src.domain.scheduling import utcnow

from .dtos import AutoDeclineCycleResponse

logger = logging.getLogger(__name__)

AUTO_DECLINE_REASON = "Auto-cancelled: mentor did not respond in time"


class AutoDeclineOverdueSessionsUseCase:
    """
    Business Rules:
    - Pending sessions whose auto_decline_at has passed are cancelled by the
      system with a refund
    - A session accepted concurrently is skipped, not counted as a failure
    - Confirmed sessions starting soon without a meeting link are logged as
      warnings and left alone
    - A failure on one session never aborts the rest of the batch
    """

    def __init__(
        self,
        uow: UnitOfWork,
        lifecycle: SessionLifecycleManager,
        meeting_link_warning_minutes: int = 30,
    ):
        self.uow = uow
        self.lifecycle = lifecycle
        self.meeting_link_warning_minutes = meeting_link_warning_minutes

    async def execute(self, now: Optional[datetime] = None) -> Result[AutoDeclineCycleResponse]:
        now = now or utcnow()
        declined, skipped, failed = [], 0, 0

        async with self.uow:
            overdue = await self.uow.sessions.get_overdue_pending(now)
            if overdue:
                logger.info(f"Found {len(overdue)} session(s) past their acceptance deadline")

            # Re-read each session: a rollback after a failure expires loaded rows
            for session_id in [s.id for s in overdue]:
                try:
                    session = await self.uow.sessions.get_by_id(session_id)
                    if session is None:
                        skipped += 1
                        continue
                    result = await self.lifecycle.cancel(
                        session,
                        cancelled_by=CancelledBy.system,
                        reason=AUTO_DECLINE_REASON,
                        expected=(SessionStatus.pending_mentor_acceptance,),
                        action="session_auto_declined",
                        automatic=True,
                    )
                except Exception:
                    failed += 1
                    logger.exception(f"Auto-decline failed for session {session_id}")
                    await self.uow.rollback()
                    continue

                if result.is_ok():
                    declined.append(str(session_id))
                    logger.info(f"Auto-declined session {session_id}")
                else:
                    skipped += 1
                    logger.info(
                        f"Skipped auto-decline of session {session_id}: {result.error.message}"
                    )

            window_end = now + timedelta(minutes=self.meeting_link_warning_minutes)
            missing_links = await self.uow.sessions.get_confirmed_without_meeting_link_between(
                now, window_end
            )
            for session in missing_links:
                logger.warning(
                    f"Confirmed session {session.id} (mentor {session.mentor_id}) starts at "
                    f"{session.scheduled_time.isoformat()} without a meeting link"
                )

            return Return.ok(
                AutoDeclineCycleResponse(
                    checked=len(overdue),
                    declined=len(declined),
                    skipped=skipped,
                    failed=failed,
                    declined_session_ids=declined,
                    missing_meeting_link_session_ids=[str(s.id) for s in missing_links],
                )
            )
