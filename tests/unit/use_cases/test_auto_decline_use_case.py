from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.app.use_cases.admin import AUTO_DECLINE_REASON, AutoDeclineOverdueSessionsUseCase
from src.domain.entities import CancelledBy, PaymentStatus, RefundStatus, SessionStatus

NOW = datetime(2030, 6, 3, 8, 0)


def _store(mock_uow, sessions):
    """Serve get_overdue_pending and get_by_id from a list of sessions"""
    by_id = {s.id: s for s in sessions}
    mock_uow.sessions.get_overdue_pending = AsyncMock(return_value=list(sessions))
    mock_uow.sessions.get_by_id = AsyncMock(side_effect=lambda session_id: by_id.get(session_id))


@pytest.mark.asyncio
async def test_overdue_pending_session_is_cancelled_and_refunded(
    mock_uow, lifecycle, payment_service, notification_service, make_session, users_by_id
):
    """Scenario D: deadline passed 10 minutes ago, price 500"""
    session = make_session(scheduled_time=NOW + timedelta(hours=2) - timedelta(minutes=10), price=500.0)
    assert session.auto_decline_at == NOW - timedelta(minutes=10)
    _store(mock_uow, [session])

    result = await AutoDeclineOverdueSessionsUseCase(mock_uow, lifecycle).execute(now=NOW)

    summary = result.value
    assert (summary.checked, summary.declined, summary.failed) == (1, 1, 0)
    assert summary.declined_session_ids == [str(session.id)]
    assert session.status == SessionStatus.cancelled
    assert session.cancelled_by == CancelledBy.system
    assert session.cancellation_reason == AUTO_DECLINE_REASON
    assert session.refund_status == RefundStatus.processed
    assert session.payment_status == PaymentStatus.refunded
    payment_service.refund.assert_awaited_once_with("pay_test123", 500.0)

    expected = mock_uow.sessions.transition_status.await_args.args[1]
    assert tuple(expected) == (SessionStatus.pending_mentor_acceptance,)
    mock_uow.sessions.get_overdue_pending.assert_awaited_once_with(NOW)
    notification_service.send_auto_cancellation_notification.assert_awaited_once()


@pytest.mark.asyncio
async def test_one_failure_does_not_abort_the_batch(
    mock_uow, lifecycle, make_session
):
    broken = make_session(scheduled_time=NOW + timedelta(minutes=30))
    healthy = make_session(scheduled_time=NOW + timedelta(minutes=45))
    _store(mock_uow, [broken, healthy])
    mock_uow.sessions.transition_status = AsyncMock(
        side_effect=[RuntimeError("database is locked"), True]
    )

    result = await AutoDeclineOverdueSessionsUseCase(mock_uow, lifecycle).execute(now=NOW)

    summary = result.value
    assert (summary.checked, summary.declined, summary.failed) == (2, 1, 1)
    assert summary.declined_session_ids == [str(healthy.id)]
    mock_uow.rollback.assert_awaited_once()
    assert healthy.status == SessionStatus.cancelled


@pytest.mark.asyncio
async def test_session_accepted_meanwhile_is_skipped(mock_uow, lifecycle, payment_service, make_session):
    session = make_session(scheduled_time=NOW + timedelta(minutes=30))
    _store(mock_uow, [session])
    mock_uow.sessions.transition_status = AsyncMock(return_value=False)

    result = await AutoDeclineOverdueSessionsUseCase(mock_uow, lifecycle).execute(now=NOW)

    assert (result.value.declined, result.value.skipped, result.value.failed) == (0, 1, 0)
    payment_service.refund.assert_not_awaited()


@pytest.mark.asyncio
async def test_confirmed_session_without_link_is_only_warned_about(
    mock_uow, lifecycle, make_session, caplog
):
    soon = make_session(status=SessionStatus.confirmed, scheduled_time=NOW + timedelta(minutes=20))
    mock_uow.sessions.get_confirmed_without_meeting_link_between = AsyncMock(return_value=[soon])

    with caplog.at_level("WARNING"):
        result = await AutoDeclineOverdueSessionsUseCase(
            mock_uow, lifecycle, meeting_link_warning_minutes=30
        ).execute(now=NOW)

    assert result.value.missing_meeting_link_session_ids == [str(soon.id)]
    assert soon.status == SessionStatus.confirmed
    assert f"Confirmed session {soon.id}" in caplog.text
    mock_uow.sessions.get_confirmed_without_meeting_link_between.assert_awaited_once_with(
        NOW, NOW + timedelta(minutes=30)
    )
    mock_uow.sessions.transition_status.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_cycle(mock_uow, lifecycle):
    result = await AutoDeclineOverdueSessionsUseCase(mock_uow, lifecycle).execute(now=NOW)

    assert result.value.checked == 0
    mock_uow.commit.assert_not_awaited()
