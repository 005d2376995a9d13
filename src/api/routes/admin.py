"""
Admin API Routes - Session Monitoring Endpoints

Operator endpoints for the auto-decline monitor.
Authentication is via Admin API Key, not user JWTs.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ServerError, raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.session_monitor import SessionMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    AutoDeclineCycleResponse,
    AutoDeclineOverdueSessionsUseCase,
    GetMonitoringStatsUseCase,
    GetSessionsNearAutoDeclineUseCase,
    ManualDeclineResponse,
    ManualDeclineSessionUseCase,
    MonitoringStatsResponse,
    NearAutoDeclineResponse,
)
from src.depends import get_session_lifecycle_manager, get_session_monitor, get_unit_of_work

router = APIRouter(prefix="/admin/sessions", tags=["Admin"])


@router.get(
    "/monitoring-stats",
    status_code=status.HTTP_200_OK,
    response_model=MonitoringStatsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def get_monitoring_stats(
    uow: UnitOfWork = Depends(get_unit_of_work),
    monitor: Optional[SessionMonitor] = Depends(get_session_monitor),
):
    """
    Monitoring Stats

    Monitor state plus counts of pending sessions, sessions auto-declining
    within the hour and confirmed sessions without a meeting link.

    Requires: X-Admin-API-Key header
    """
    use_case = GetMonitoringStatsUseCase(uow)
    result = await use_case.execute(
        is_running=monitor.is_running if monitor else False,
        interval_seconds=(
            monitor.interval_seconds if monitor else ApplicationConfig.MONITOR_INTERVAL_SECONDS
        ),
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/near-auto-decline",
    status_code=status.HTTP_200_OK,
    response_model=NearAutoDeclineResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def get_sessions_near_auto_decline(
    minutes_ahead: int = Query(60, ge=1, le=24 * 60),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Sessions Near Auto-Decline

    Pending sessions whose acceptance deadline falls in the next minutes_ahead.

    Requires: X-Admin-API-Key header
    """
    use_case = GetSessionsNearAutoDeclineUseCase(uow)
    result = await use_case.execute(minutes_ahead)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/auto-decline/run",
    status_code=status.HTTP_200_OK,
    response_model=AutoDeclineCycleResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def run_auto_decline(
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """
    Run Auto-Decline Now

    Runs one monitor cycle immediately, independent of the background schedule.

    Requires: X-Admin-API-Key header
    """
    use_case = AutoDeclineOverdueSessionsUseCase(
        uow, lifecycle, ApplicationConfig.MEETING_LINK_WARNING_MINUTES
    )
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class DeclineSessionRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=450)


@router.post(
    "/{session_id}/decline",
    status_code=status.HTTP_200_OK,
    response_model=ManualDeclineResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def decline_session(
    session_id: UUID,
    request: DeclineSessionRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """
    Force-Decline Pending Session

    Cancels a session awaiting mentor acceptance with the operator's reason
    and refunds it.

    Requires: X-Admin-API-Key header

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 404 Not Found: SESSION_NOT_FOUND
        - 409 Conflict: INVALID_STATUS_TRANSITION
    """
    use_case = ManualDeclineSessionUseCase(uow, lifecycle)
    result = await use_case.execute(session_id, request.reason)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
