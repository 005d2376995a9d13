from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.bookings import RescheduleBookingUseCase
from src.domain.entities import SessionStatus

SUNDAY_EVENING = datetime(2030, 6, 2, 20, 0)
MONDAY_10AM = datetime(2030, 6, 3, 10, 0)


@pytest.fixture
def pending(mock_uow, mentor_profile, users_by_id, make_session):
    session = make_session()
    mock_uow.sessions.get_by_id = AsyncMock(return_value=session)
    mock_uow.mentor_profiles.get_by_user_id = AsyncMock(return_value=mentor_profile)
    return session


@pytest.mark.asyncio
async def test_moves_pending_session_and_rederives_deadline(mock_uow, pending, student):
    result = await RescheduleBookingUseCase(mock_uow).execute(
        pending.id, student.id, MONDAY_10AM, now=SUNDAY_EVENING
    )

    booking = result.value
    assert booking.scheduled_time == MONDAY_10AM
    assert booking.auto_decline_at == MONDAY_10AM - timedelta(hours=2)
    assert booking.price == 500.0
    assert booking.payment_id == "pay_test123"

    session_id, expected, values = mock_uow.sessions.transition_status.await_args.args
    assert tuple(expected) == (SessionStatus.pending_mentor_acceptance,)
    assert values["scheduled_time"] == MONDAY_10AM
    assert values["auto_decline_at"] == MONDAY_10AM - timedelta(hours=2)
    assert mock_uow.sessions.find_conflicting.await_args.kwargs["exclude_session_id"] == pending.id

    audit = mock_uow.audit_events.create.await_args.args[0]
    assert audit.action == "booking_rescheduled"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_mentor_cannot_reschedule(mock_uow, pending, mentor):
    result = await RescheduleBookingUseCase(mock_uow).execute(
        pending.id, mentor.id, MONDAY_10AM, now=SUNDAY_EVENING
    )

    assert result.error.code == "FORBIDDEN"


@pytest.mark.asyncio
async def test_confirmed_session_cannot_move(mock_uow, pending, student):
    pending.status = SessionStatus.confirmed

    result = await RescheduleBookingUseCase(mock_uow).execute(
        pending.id, student.id, MONDAY_10AM, now=SUNDAY_EVENING
    )

    assert result.error.code == "INVALID_STATUS_TRANSITION"
    mock_uow.sessions.transition_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_new_time_must_respect_lead_time(mock_uow, pending, student):
    result = await RescheduleBookingUseCase(mock_uow).execute(
        pending.id, student.id, MONDAY_10AM, now=MONDAY_10AM - timedelta(hours=1)
    )

    assert result.error.code == "LEAD_TIME_VIOLATION"
    assert pending.scheduled_time == datetime(2030, 6, 3, 9, 0)


@pytest.mark.asyncio
async def test_write_conflict_maps_to_slot_conflict(mock_uow, pending, student):
    mock_uow.sessions.transition_status = AsyncMock(
        side_effect=IntegrityError("UPDATE sessions", {}, Exception("unique"))
    )

    result = await RescheduleBookingUseCase(mock_uow).execute(
        pending.id, student.id, MONDAY_10AM, now=SUNDAY_EVENING
    )

    assert result.error.code == "SLOT_CONFLICT"
    mock_uow.rollback.assert_awaited_once()
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_session(mock_uow, student):
    result = await RescheduleBookingUseCase(mock_uow).execute(
        uuid4(), student.id, MONDAY_10AM, now=SUNDAY_EVENING
    )

    assert result.error.code == "SESSION_NOT_FOUND"
