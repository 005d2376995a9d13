from datetime import datetime

import pytest

from src.adapter.services.logging_notification_service import (
    AUTO_CANCELLATION_REASON,
    LoggingNotificationService,
    describe_schedule,
    refund_amount,
)
from src.domain.entities import CancelledBy, RefundStatus, SessionStatus


def test_describe_schedule(make_session):
    session = make_session(scheduled_time=datetime(2030, 6, 3, 9, 0))

    assert describe_schedule(session) == {
        "session_date": "Monday, June 03, 2030",
        "session_time": "9:00 AM UTC",
    }


@pytest.mark.parametrize(
    "refund_status,expected",
    [(RefundStatus.processed, 500.0), (RefundStatus.failed, 0.0), (None, 0.0)],
)
def test_refund_amount_only_counts_processed_refunds(make_session, refund_status, expected):
    assert refund_amount(make_session(refund_status=refund_status)) == expected


@pytest.mark.asyncio
async def test_booking_confirmation_goes_to_both_parties(make_session, student, mentor, caplog):
    with caplog.at_level("INFO"):
        await LoggingNotificationService().send_booking_confirmation(
            make_session(), student, mentor
        )

    assert f"[email to {student.email}] Booking received" in caplog.text
    assert f"[email to {mentor.email}] New booking request" in caplog.text


@pytest.mark.asyncio
async def test_cancellation_mentions_refund(make_session, student, mentor, caplog):
    session = make_session(
        status=SessionStatus.cancelled,
        cancellation_reason="Exam clash",
        refund_status=RefundStatus.processed,
    )

    with caplog.at_level("INFO"):
        await LoggingNotificationService().send_cancellation_notification(
            session, student, mentor, cancelled_by=CancelledBy.student
        )

    assert "cancelled by student" in caplog.text
    assert "Reason: Exam clash" in caplog.text
    assert "Refund: 500.0 INR" in caplog.text


@pytest.mark.asyncio
async def test_auto_cancellation_uses_fixed_reason(make_session, student, mentor, caplog):
    with caplog.at_level("INFO"):
        await LoggingNotificationService().send_auto_cancellation_notification(
            make_session(status=SessionStatus.cancelled), student, mentor
        )

    assert AUTO_CANCELLATION_REASON in caplog.text
    assert caplog.text.count("Session cancelled") == 2
