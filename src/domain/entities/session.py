"""
Session Entity

A booked mentoring session between a student and a mentor.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import event, text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import (
    CancelledBy,
    MeetingProvider,
    PaymentStatus,
    RefundStatus,
    SessionStatus,
    SessionType,
)

AUTO_DECLINE_LEAD = timedelta(hours=2)

# Forward-only lifecycle; cancelled and completed are terminal.
ALLOWED_TRANSITIONS = {
    SessionStatus.pending_mentor_acceptance: {
        SessionStatus.confirmed,
        SessionStatus.cancelled,
    },
    SessionStatus.confirmed: {SessionStatus.in_progress, SessionStatus.cancelled},
    SessionStatus.in_progress: {SessionStatus.completed},
    SessionStatus.completed: set(),
    SessionStatus.cancelled: set(),
}

CANCELLABLE_STATUSES = (
    SessionStatus.pending_mentor_acceptance,
    SessionStatus.confirmed,
)


def compute_auto_decline_at(scheduled_time: datetime) -> datetime:
    return scheduled_time - AUTO_DECLINE_LEAD


class Session(SQLModel, table=True):
    """
    Session entity - a mentoring session booking.

    Business Rules:
    - Created in pending_mentor_acceptance; mentor confirms by supplying a meeting link
    - auto_decline_at is always scheduled_time - 2h and is recomputed on every write
    - duration is bounded to [15, 180] minutes
    - end_time is derived from scheduled_time + duration, never stored
    - At most one non-cancelled session per (mentor, scheduled_time)
    - Never hard-deleted; cancelled is a terminal status
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slot_id: str = Field(max_length=100)

    student_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    mentor_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    subject: str = Field(max_length=200)
    session_type: SessionType = Field(default=SessionType.video)
    session_notes: Optional[str] = Field(default=None, max_length=1000)
    booking_source: str = Field(default="manual", max_length=20)

    scheduled_time: datetime = Field(sa_column=Column(DateTime, nullable=False))
    duration: int = Field(ge=15, le=180)
    status: SessionStatus = Field(
        default=SessionStatus.pending_mentor_acceptance, index=True
    )
    auto_decline_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    # Meeting link supplied by the mentor on acceptance
    meeting_url: Optional[str] = Field(default=None, max_length=500)
    meeting_provider: Optional[MeetingProvider] = Field(default=None)
    mentor_accepted_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Payment
    price: float = Field(default=0, ge=0)
    currency: str = Field(default="INR", max_length=3)
    payment_id: Optional[str] = Field(default=None, max_length=100)
    payment_status: PaymentStatus = Field(default=PaymentStatus.completed)
    refund_id: Optional[str] = Field(default=None, max_length=100)
    refund_status: Optional[RefundStatus] = Field(default=None)

    # Cancellation
    cancellation_reason: Optional[str] = Field(default=None, max_length=500)
    cancelled_by: Optional[CancelledBy] = Field(default=None)
    cancelled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Feedback
    student_rating: Optional[int] = Field(default=None, ge=1, le=5)
    mentor_rating: Optional[int] = Field(default=None, ge=1, le=5)
    student_review: Optional[str] = Field(default=None, max_length=1000)
    mentor_review: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_session_mentor_scheduled", "mentor_id", "scheduled_time"),
        Index("idx_session_student_scheduled", "student_id", "scheduled_time"),
        Index("idx_session_status_scheduled", "status", "scheduled_time"),
        Index("idx_session_auto_decline", "auto_decline_at", "status"),
        Index(
            "uq_session_mentor_active_start",
            "mentor_id",
            "scheduled_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    @classmethod
    def book(
        cls,
        *,
        student_id: UUID,
        mentor_id: UUID,
        slot_id: str,
        subject: str,
        scheduled_time: datetime,
        duration: int,
        price: float,
        currency: str,
        payment_id: Optional[str],
        session_type: SessionType = SessionType.video,
        session_notes: Optional[str] = None,
    ) -> "Session":
        """Build a new pending session with its schedule invariants applied."""
        session = cls(
            student_id=student_id,
            mentor_id=mentor_id,
            slot_id=slot_id,
            subject=subject,
            session_type=session_type,
            session_notes=session_notes,
            scheduled_time=scheduled_time,
            duration=duration,
            auto_decline_at=compute_auto_decline_at(scheduled_time),
            status=SessionStatus.pending_mentor_acceptance,
            price=price,
            currency=currency,
            payment_id=payment_id,
            payment_status=PaymentStatus.completed,
        )
        session.enforce_schedule_invariants()
        return session

    @property
    def end_time(self) -> datetime:
        return self.scheduled_time + timedelta(minutes=self.duration)

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def can_transition_to(self, target: SessionStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[SessionStatus(self.status)]

    def conflicts_with(self, other: "Session") -> bool:
        from src.domain.scheduling import intervals_overlap

        return intervals_overlap(
            self.scheduled_time, self.end_time, other.scheduled_time, other.end_time
        )

    def reschedule(self, scheduled_time: datetime, slot_id: str) -> None:
        self.scheduled_time = scheduled_time
        self.slot_id = slot_id
        self.enforce_schedule_invariants()

    def enforce_schedule_invariants(self) -> None:
        """
        Validate duration and re-derive auto_decline_at from scheduled_time.

        Raises:
            ValueError: duration out of bounds or missing scheduled_time
        """
        from src.domain.scheduling import MAX_SESSION_MINUTES, MIN_SESSION_MINUTES

        if self.scheduled_time is None:
            raise ValueError("scheduled_time is required")
        if not MIN_SESSION_MINUTES <= int(self.duration) <= MAX_SESSION_MINUTES:
            raise ValueError(
                f"duration must be between {MIN_SESSION_MINUTES} and "
                f"{MAX_SESSION_MINUTES} minutes"
            )
        self.auto_decline_at = compute_auto_decline_at(self.scheduled_time)

    def rate(self, by_student: bool, rating: int, review: Optional[str] = None) -> None:
        """
        Attach feedback from one party.

        Raises:
            ValueError: rating outside 1..5
        """
        if not 1 <= int(rating) <= 5:
            raise ValueError("rating must be between 1 and 5")
        if by_student:
            self.student_rating = rating
            self.student_review = review
        else:
            self.mentor_rating = rating
            self.mentor_review = review


@event.listens_for(Session, "before_insert")
@event.listens_for(Session, "before_update")
def _apply_schedule_invariants(mapper, connection, target: Session) -> None:
    target.enforce_schedule_invariants()
    target.updated_at = datetime.utcnow()
