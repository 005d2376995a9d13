"""
Session Monitor

Background sweep that auto-declines sessions the mentor never accepted and
warns about confirmed sessions that are about to start without a meeting
link. Started and stopped by the application lifespan; ``run_cycle`` can be
called directly.
"""

import asyncio
import logging
from typing import AsyncContextManager, Callable, Optional

from src.app.services.notification_service import INotificationService
from src.app.services.payment_service import IPaymentService
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import AutoDeclineCycleResponse, AutoDeclineOverdueSessionsUseCase

logger = logging.getLogger(__name__)


class SessionMonitor:
    def __init__(
        self,
        uow_scope: Callable[[], AsyncContextManager[UnitOfWork]],
        payment_service: IPaymentService,
        notification_service: INotificationService,
        interval_seconds: int = 300,
        meeting_link_warning_minutes: int = 30,
        call_timeout: float = 10.0,
    ):
        self.uow_scope = uow_scope
        self.payment_service = payment_service
        self.notification_service = notification_service
        self.interval_seconds = interval_seconds
        self.meeting_link_warning_minutes = meeting_link_warning_minutes
        self.call_timeout = call_timeout
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            logger.warning("Session monitor already running")
            return
        self._task = asyncio.create_task(self._run(), name="session-monitor")
        logger.info(f"Session monitor started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session monitor stopped")

    async def run_cycle(self) -> AutoDeclineCycleResponse:
        """Run one check cycle in its own unit of work"""
        async with self.uow_scope() as uow:
            lifecycle = SessionLifecycleManager(
                uow,
                self.payment_service,
                self.notification_service,
                call_timeout=self.call_timeout,
            )
            use_case = AutoDeclineOverdueSessionsUseCase(
                uow, lifecycle, self.meeting_link_warning_minutes
            )
            result = await use_case.execute()
            return result.value

    async def _run(self) -> None:
        while True:
            try:
                summary = await self.run_cycle()
                if summary.checked or summary.missing_meeting_link_session_ids:
                    logger.info(
                        f"Session monitor cycle: {summary.declined} declined, "
                        f"{summary.failed} failed, "
                        f"{len(summary.missing_meeting_link_session_ids)} missing meeting link"
                    )
            except Exception:
                logger.exception("Session monitor cycle failed")
            await asyncio.sleep(self.interval_seconds)
