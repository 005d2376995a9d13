from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.google_meet_link_resolver import GoogleMeetLinkResolver
from src.adapter.services.logging_notification_service import LoggingNotificationService
from src.adapter.services.mock_payment_service import MockPaymentService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.services.meeting_link_resolver import IMeetingLinkResolver
from src.app.services.notification_service import INotificationService
from src.app.services.payment_service import IPaymentService
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.session_monitor import SessionMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.domain.scheduling import BookingPolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()

payment_service = MockPaymentService()
notification_service = LoggingNotificationService()
meeting_link_resolver = GoogleMeetLinkResolver()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@asynccontextmanager
async def unit_of_work_scope():
    """Unit of work outside a request, for background jobs"""
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_payment_service() -> IPaymentService:
    return payment_service


def get_notification_service() -> INotificationService:
    return notification_service


def get_meeting_link_resolver() -> IMeetingLinkResolver:
    return meeting_link_resolver


def get_booking_policy() -> BookingPolicy:
    return BookingPolicy(
        slot_duration_minutes=ApplicationConfig.SLOT_DURATION_MINUTES,
        slot_lead_buffer_minutes=ApplicationConfig.SLOT_LEAD_BUFFER_MINUTES,
        booking_lead_time_minutes=ApplicationConfig.BOOKING_LEAD_TIME_MINUTES,
        default_hourly_rate=ApplicationConfig.DEFAULT_HOURLY_RATE,
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
    )


def get_session_lifecycle_manager(
    uow: UnitOfWork = Depends(get_unit_of_work),
    payments: IPaymentService = Depends(get_payment_service),
    notifications: INotificationService = Depends(get_notification_service),
    resolver: IMeetingLinkResolver = Depends(get_meeting_link_resolver),
) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        uow,
        payments,
        notifications,
        meeting_link_resolver=resolver,
        call_timeout=ApplicationConfig.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )


def build_session_monitor(uow_scope=unit_of_work_scope) -> SessionMonitor:
    return SessionMonitor(
        uow_scope,
        payment_service,
        notification_service,
        interval_seconds=ApplicationConfig.MONITOR_INTERVAL_SECONDS,
        meeting_link_warning_minutes=ApplicationConfig.MEETING_LINK_WARNING_MINUTES,
        call_timeout=ApplicationConfig.EXTERNAL_CALL_TIMEOUT_SECONDS,
    )


def get_session_monitor(request: Request) -> Optional[SessionMonitor]:
    return getattr(request.app.state, "session_monitor", None)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id and role

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "user_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
