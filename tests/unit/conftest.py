from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.adapter.services.google_meet_link_resolver import GoogleMeetLinkResolver
from src.app.services.notification_service import INotificationService
from src.app.services.payment_service import PaymentResult, RefundResult
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.domain.entities import (
    MentorProfile,
    Session,
    SessionStatus,
    User,
    UserRole,
)

from tests.fixtures.schedules import WEEKDAY_MORNINGS


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)

    uow.mentor_profiles = MagicMock()
    uow.mentor_profiles.get_by_user_id = AsyncMock(return_value=None)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda s: s)
    uow.sessions.update = AsyncMock(side_effect=lambda s: s)
    uow.sessions.get_active_by_mentor_between = AsyncMock(return_value=[])
    uow.sessions.find_conflicting = AsyncMock(return_value=[])
    uow.sessions.transition_status = AsyncMock(return_value=True)
    uow.sessions.get_overdue_pending = AsyncMock(return_value=[])
    uow.sessions.get_pending_auto_declining_between = AsyncMock(return_value=[])
    uow.sessions.get_confirmed_without_meeting_link_between = AsyncMock(return_value=[])
    uow.sessions.count_by_status = AsyncMock(return_value=0)
    uow.sessions.count_pending_auto_declining_between = AsyncMock(return_value=0)
    uow.sessions.count_confirmed_without_meeting_link = AsyncMock(return_value=0)
    uow.sessions.get_by_participant = AsyncMock(return_value=([], 0))

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    uow.audit_events.get_by_session_id = AsyncMock(return_value=[])

    return uow


@pytest.fixture
def payment_service():
    payments = MagicMock()
    payments.charge = AsyncMock(
        return_value=PaymentResult(success=True, payment_id="pay_test123")
    )
    payments.refund = AsyncMock(
        return_value=RefundResult(success=True, refund_id="ref_test123")
    )
    return payments


@pytest.fixture
def notification_service():
    return AsyncMock(spec=INotificationService)


@pytest.fixture
def lifecycle(mock_uow, payment_service, notification_service):
    return SessionLifecycleManager(
        mock_uow,
        payment_service,
        notification_service,
        meeting_link_resolver=GoogleMeetLinkResolver(),
        call_timeout=0.5,
    )


@pytest.fixture
def student():
    return User(
        id=uuid4(),
        email="student@example.com",
        first_name="Asha",
        last_name="Rao",
        role=UserRole.student,
    )


@pytest.fixture
def mentor():
    return User(
        id=uuid4(),
        email="mentor@example.com",
        first_name="Vikram",
        last_name="Iyer",
        role=UserRole.mentor,
    )


@pytest.fixture
def mentor_profile(mentor):
    return MentorProfile(
        user_id=mentor.id,
        display_name=mentor.full_name,
        hourly_rate=500.0,
        currency="INR",
        weekly_schedule=WEEKDAY_MORNINGS,
    )


@pytest.fixture
def users_by_id(mock_uow, student, mentor):
    """Wire uow.users.get_by_id to the student and mentor fixtures"""
    users = {student.id: student, mentor.id: mentor}
    mock_uow.users.get_by_id = AsyncMock(side_effect=lambda user_id: users.get(user_id))
    return users


@pytest.fixture
def make_session(student, mentor):
    def _make(
        scheduled_time: datetime = datetime(2030, 6, 3, 9, 0),
        status: SessionStatus = SessionStatus.pending_mentor_acceptance,
        price: float = 500.0,
        payment_id="pay_test123",
        duration: int = 60,
        **overrides,
    ) -> Session:
        session = Session.book(
            student_id=student.id,
            mentor_id=mentor.id,
            slot_id=f"{mentor.id}-0",
            subject="Career guidance",
            scheduled_time=scheduled_time,
            duration=duration,
            price=price,
            currency="INR",
            payment_id=payment_id,
        )
        session.status = status
        session.created_at = scheduled_time - timedelta(days=1)
        for field, value in overrides.items():
            setattr(session, field, value)
        return session

    return _make
