"""
Admin Use Case DTOs

Responses for session monitoring and operator actions.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AutoDeclineCycleResponse(BaseModel):
    """Outcome of one auto-decline check cycle"""

    checked: int
    declined: int
    skipped: int
    failed: int
    declined_session_ids: List[str]
    missing_meeting_link_session_ids: List[str]


class MonitoringStatsResponse(BaseModel):
    """Snapshot of the session monitor and the sessions it watches"""

    is_running: bool
    interval_seconds: int
    pending_sessions: int
    sessions_near_auto_decline: int
    confirmed_without_meeting_link: int


class NearAutoDeclineSession(BaseModel):
    id: str
    mentor_id: str
    student_id: str
    subject: str
    scheduled_time: datetime
    auto_decline_at: datetime
    minutes_until_auto_decline: int


class NearAutoDeclineResponse(BaseModel):
    """Pending sessions that will be auto-declined within the window"""

    minutes_ahead: int
    count: int
    sessions: List[NearAutoDeclineSession]


class ManualDeclineResponse(BaseModel):
    id: str
    status: str
    cancellation_reason: Optional[str] = None
    refund_status: Optional[str] = None
