"""
Logging Notification Service

Renders the participant emails for booking events and writes them to the
log instead of delivering them.
"""

import logging
from typing import Dict, Iterable

from src.app.services.notification_service import INotificationService
from src.domain.entities import CancelledBy, RefundStatus, Session, User

logger = logging.getLogger(__name__)

AUTO_CANCELLATION_REASON = "Mentor did not accept within the required timeframe"


def describe_schedule(session: Session) -> Dict[str, str]:
    """Human readable date and time of a session, e.g. Monday, June 02, 2025 / 9:00 AM UTC"""
    scheduled = session.scheduled_time
    return {
        "session_date": scheduled.strftime("%A, %B %d, %Y"),
        "session_time": scheduled.strftime("%I:%M %p UTC").lstrip("0"),
    }


def refund_amount(session: Session) -> float:
    if session.refund_status == RefundStatus.processed:
        return session.price
    return 0.0


class LoggingNotificationService(INotificationService):
    """Notification adapter that logs rendered messages"""

    def _deliver(self, recipients: Iterable[User], subject_line: str, body: str) -> None:
        for recipient in recipients:
            logger.info(f"[email to {recipient.email}] {subject_line}: {body}")

    async def send_booking_confirmation(
        self, session: Session, student: User, mentor: User
    ) -> None:
        when = describe_schedule(session)
        self._deliver(
            [student],
            "Booking received",
            f"Your {session.subject} session with {mentor.full_name} on "
            f"{when['session_date']} at {when['session_time']} is awaiting mentor confirmation",
        )
        self._deliver(
            [mentor],
            "New booking request",
            f"{student.full_name} booked {session.subject} on {when['session_date']} "
            f"at {when['session_time']}. Add a meeting link before "
            f"{session.auto_decline_at.isoformat()} to confirm",
        )

    async def send_session_acceptance(
        self, session: Session, student: User, mentor: User
    ) -> None:
        when = describe_schedule(session)
        body = (
            f"{session.subject} with {mentor.full_name} and {student.full_name} on "
            f"{when['session_date']} at {when['session_time']} is confirmed. "
            f"Join at {session.meeting_url}"
        )
        self._deliver([student, mentor], "Session confirmed", body)

    async def send_cancellation_notification(
        self, session: Session, student: User, mentor: User, cancelled_by: CancelledBy
    ) -> None:
        when = describe_schedule(session)
        body = (
            f"{session.subject} on {when['session_date']} at {when['session_time']} was "
            f"cancelled by {CancelledBy(cancelled_by).value}. "
            f"Reason: {session.cancellation_reason or 'No reason provided'}. "
            f"Refund: {refund_amount(session)} {session.currency}"
        )
        self._deliver([student, mentor], "Session cancelled", body)

    async def send_auto_cancellation_notification(
        self, session: Session, student: User, mentor: User
    ) -> None:
        when = describe_schedule(session)
        body = (
            f"{session.subject} on {when['session_date']} at {when['session_time']} was "
            f"cancelled automatically. Reason: {AUTO_CANCELLATION_REASON}. "
            f"Refund: {refund_amount(session)} {session.currency}"
        )
        self._deliver([student, mentor], "Session cancelled", body)
