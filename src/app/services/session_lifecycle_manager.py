"""
Session Lifecycle Manager

State machine for mentoring sessions. Every status change is a
compare-and-set on the stored status, so concurrent callers cannot apply the
same transition twice. Compensating actions (refund, notifications) run after
the transition has been committed.

Callers hold the unit of work open (``async with uow``) around each call.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.meeting_link_resolver import IMeetingLinkResolver
from src.app.services.notification_service import INotificationService
from src.app.services.payment_service import IPaymentService, RefundResult
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import (
    AuditEvent,
    CancelledBy,
    PaymentStatus,
    RefundStatus,
    Session,
    SessionStatus,
    User,
)
from src.domain.entities.session import ALLOWED_TRANSITIONS, CANCELLABLE_STATUSES
from src.domain.scheduling import utcnow

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 500


class SessionLifecycleManager:
    """
    Applies session transitions and their side effects.

    Transitions:
    - pending_mentor_acceptance -> confirmed (mentor supplies a meeting link)
    - confirmed -> in_progress -> completed (mentor driven)
    - pending_mentor_acceptance | confirmed -> cancelled (refund when paid)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_service: IPaymentService,
        notification_service: INotificationService,
        meeting_link_resolver: Optional[IMeetingLinkResolver] = None,
        call_timeout: float = 10.0,
    ):
        self.uow = uow
        self.payment_service = payment_service
        self.notification_service = notification_service
        self.meeting_link_resolver = meeting_link_resolver
        self.call_timeout = call_timeout

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, session: Session, actor_id: UUID) -> Result[Session]:
        """
        Insert a validated pending session, commit it and notify both parties.

        A unique-index violation means another booking took the slot between
        validation and insert. The slot is re-checked once: if it is actually
        free the insert is retried, otherwise the charge is refunded and
        SLOT_CONFLICT is returned.
        """
        for attempt in (1, 2):
            try:
                await self.uow.sessions.create(session)
                break
            except IntegrityError:
                await self.uow.rollback()
                logger.warning(
                    f"Write conflict inserting session for mentor {session.mentor_id} "
                    f"at {session.scheduled_time.isoformat()} (attempt {attempt})"
                )
                conflicts = await self.uow.sessions.find_conflicting(
                    session.mentor_id, session.scheduled_time, session.duration
                )
                if conflicts or attempt == 2:
                    await self._compensate_charge(session)
                    return Return.err(
                        Error(
                            "SLOT_CONFLICT",
                            "This time slot was just booked by someone else",
                        )
                    )

        await self.uow.audit_events.create(
            AuditEvent(
                session_id=session.id,
                actor_id=actor_id,
                action="booking_created",
                event_metadata={
                    "mentor_id": str(session.mentor_id),
                    "scheduled_time": session.scheduled_time.isoformat(),
                    "price": session.price,
                    "payment_id": session.payment_id,
                },
            )
        )
        await self.uow.commit()
        logger.info(f"Session {session.id} booked, awaiting mentor acceptance")

        await self._notify(
            session, partial(self.notification_service.send_booking_confirmation, session)
        )
        return Return.ok(session)

    # ------------------------------------------------------------------
    # Mentor acceptance / meeting link
    # ------------------------------------------------------------------

    async def accept(self, session: Session, meeting_url: str) -> Result[Session]:
        """
        Confirm a pending session with a meeting link, or replace the link of
        an already confirmed session. The status is unchanged on any error.
        """
        if self.meeting_link_resolver is None:
            raise RuntimeError("meeting_link_resolver is required to accept sessions")

        provider = await self.meeting_link_resolver.resolve(meeting_url)
        if provider is None:
            return Return.err(
                Error(
                    "INVALID_MEETING_URL",
                    "Meeting link must be a Google Meet URL like "
                    "https://meet.google.com/abc-defg-hij",
                )
            )

        meeting_url = meeting_url.strip()
        status = SessionStatus(session.status)

        if status == SessionStatus.pending_mentor_acceptance:
            result = await self._transition(
                session,
                expected=(SessionStatus.pending_mentor_acceptance,),
                target=SessionStatus.confirmed,
                values={
                    "meeting_url": meeting_url,
                    "meeting_provider": provider,
                    "mentor_accepted_at": utcnow(),
                },
                actor_id=session.mentor_id,
                action="booking_accepted",
            )
            if result.is_ok():
                await self._notify(
                    session, partial(self.notification_service.send_session_acceptance, session)
                )
            return result

        if status == SessionStatus.confirmed:
            return await self._transition(
                session,
                expected=(SessionStatus.confirmed,),
                target=SessionStatus.confirmed,
                values={"meeting_url": meeting_url, "meeting_provider": provider},
                actor_id=session.mentor_id,
                action="meeting_link_updated",
            )

        return Return.err(self._invalid_transition(session, SessionStatus.confirmed))

    # ------------------------------------------------------------------
    # Start / complete
    # ------------------------------------------------------------------

    async def start(self, session: Session) -> Result[Session]:
        return await self._transition(
            session,
            expected=(SessionStatus.confirmed,),
            target=SessionStatus.in_progress,
            values={},
            actor_id=session.mentor_id,
            action="session_started",
        )

    async def complete(self, session: Session) -> Result[Session]:
        return await self._transition(
            session,
            expected=(SessionStatus.in_progress,),
            target=SessionStatus.completed,
            values={},
            actor_id=session.mentor_id,
            action="session_completed",
        )

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    async def cancel(
        self,
        session: Session,
        cancelled_by: CancelledBy,
        reason: str,
        actor_id: Optional[UUID] = None,
        expected: Sequence[SessionStatus] = CANCELLABLE_STATUSES,
        action: str = "booking_cancelled",
        automatic: bool = False,
    ) -> Result[Session]:
        """
        Cancel a session and refund its charge.

        The cancellation is committed before the refund is requested. A failed
        or timed out refund is recorded as refund_status=failed and leaves
        payment_status untouched; the cancellation stands either way.
        """
        result = await self._transition(
            session,
            expected=expected,
            target=SessionStatus.cancelled,
            values={
                "cancelled_by": cancelled_by,
                "cancellation_reason": (reason or "No reason provided")[:MAX_REASON_LENGTH],
                "cancelled_at": utcnow(),
            },
            actor_id=actor_id,
            action=action,
        )
        if result.is_err():
            return result

        if session.price > 0 and session.payment_id:
            refund = await self._request_refund(session)
            if refund.success:
                session.refund_id = refund.refund_id
                session.refund_status = RefundStatus.processed
                session.payment_status = PaymentStatus.refunded
                logger.info(f"Refund {refund.refund_id} issued for session {session.id}")
            else:
                session.refund_status = RefundStatus.failed
                logger.error(f"Refund failed for session {session.id}: {refund.error}")
                await self.uow.audit_events.create(
                    AuditEvent(
                        session_id=session.id,
                        actor_id=actor_id,
                        action="refund_failed",
                        event_metadata={
                            "payment_id": session.payment_id,
                            "amount": session.price,
                            "error": refund.error,
                        },
                    )
                )
            await self.uow.sessions.update(session)
            await self.uow.commit()

        if automatic:
            send = partial(
                self.notification_service.send_auto_cancellation_notification, session
            )
        else:
            send = partial(
                self.notification_service.send_cancellation_notification,
                session,
                cancelled_by=cancelled_by,
            )
        await self._notify(session, send)
        return Return.ok(session)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _transition(
        self,
        session: Session,
        expected: Sequence[SessionStatus],
        target: SessionStatus,
        values: Dict[str, Any],
        actor_id: Optional[UUID],
        action: str,
    ) -> Result[Session]:
        for status in expected:
            if status != target and target not in ALLOWED_TRANSITIONS[status]:
                raise ValueError(f"{status.value} -> {target.value} is not a lifecycle transition")

        previous = SessionStatus(session.status)
        changes = {"status": target, **values}
        moved = await self.uow.sessions.transition_status(session.id, expected, changes)
        if not moved:
            current = await self.uow.sessions.get_by_id(session.id)
            if current is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
            return Return.err(self._invalid_transition(current, target))

        for field, value in changes.items():
            setattr(session, field, value)

        await self.uow.audit_events.create(
            AuditEvent(
                session_id=session.id,
                actor_id=actor_id,
                action=action,
                event_metadata={"from": previous.value, "to": target.value},
            )
        )
        await self.uow.commit()
        logger.info(f"Session {session.id}: {previous.value} -> {target.value} ({action})")
        return Return.ok(session)

    @staticmethod
    def _invalid_transition(session: Session, target: SessionStatus) -> Error:
        return Error(
            "INVALID_STATUS_TRANSITION",
            f"Cannot move session from {SessionStatus(session.status).value} to {target.value}",
        )

    async def _request_refund(self, session: Session) -> RefundResult:
        try:
            return await asyncio.wait_for(
                self.payment_service.refund(session.payment_id, session.price),
                timeout=self.call_timeout,
            )
        except asyncio.TimeoutError:
            return RefundResult(
                success=False, error=f"Refund timed out after {self.call_timeout}s"
            )
        except Exception as e:
            logger.exception(f"Refund call raised for session {session.id}")
            return RefundResult(success=False, error=str(e))

    async def _compensate_charge(self, session: Session) -> None:
        if not session.payment_id:
            return
        refund = await self._request_refund(session)
        if refund.success:
            logger.info(f"Refunded charge {session.payment_id} after slot conflict")
        else:
            logger.error(
                f"Could not refund charge {session.payment_id} after slot conflict: {refund.error}"
            )

    async def _notify(
        self,
        session: Session,
        send: Callable[[User, User], Awaitable[None]],
    ) -> None:
        """Best-effort delivery; failures are logged and swallowed."""
        try:
            student = await self.uow.users.get_by_id(session.student_id)
            mentor = await self.uow.users.get_by_id(session.mentor_id)
            if student is None or mentor is None:
                logger.warning(f"Skipping notification for session {session.id}: participant missing")
                return
            await asyncio.wait_for(send(student, mentor), timeout=self.call_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Notification for session {session.id} timed out")
        except Exception:
            logger.exception(f"Notification for session {session.id} failed")
