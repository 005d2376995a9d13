"""Admin use cases for session monitoring and operator actions."""

from .auto_decline_overdue_sessions_use_case import (
    AUTO_DECLINE_REASON,
    AutoDeclineOverdueSessionsUseCase,
)
from .dtos import (
    AutoDeclineCycleResponse,
    ManualDeclineResponse,
    MonitoringStatsResponse,
    NearAutoDeclineResponse,
)
from .get_monitoring_stats_use_case import GetMonitoringStatsUseCase
from .get_sessions_near_auto_decline_use_case import GetSessionsNearAutoDeclineUseCase
from .manual_decline_session_use_case import ManualDeclineSessionUseCase

__all__ = [
    "AUTO_DECLINE_REASON",
    "AutoDeclineOverdueSessionsUseCase",
    "AutoDeclineCycleResponse",
    "GetMonitoringStatsUseCase",
    "GetSessionsNearAutoDeclineUseCase",
    "ManualDeclineSessionUseCase",
    "ManualDeclineResponse",
    "MonitoringStatsResponse",
    "NearAutoDeclineResponse",
]
