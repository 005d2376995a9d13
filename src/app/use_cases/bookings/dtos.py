"""
Booking Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the booking domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.entities import Session
from src.domain.scheduling import TimeSlot


# ============================================================================
# Command DTOs
# ============================================================================


class CreateBookingCommand(BaseModel):
    """Command for booking a slot"""

    mentor_id: str
    scheduled_time: datetime
    subject: str
    session_type: str = "video"
    session_notes: Optional[str] = None
    payment_method_id: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class AvailableSlotsResponse(BaseModel):
    """Response for list available slots use case"""

    mentor_id: str
    date: str
    slots: List[TimeSlot]


class BookingResponse(BaseModel):
    """Full view of a session as returned to its participants"""

    id: str
    slot_id: str
    student_id: str
    mentor_id: str
    subject: str
    session_type: str
    session_notes: Optional[str] = None
    scheduled_time: datetime
    end_time: datetime
    duration: int
    status: str
    auto_decline_at: datetime
    meeting_url: Optional[str] = None
    meeting_provider: Optional[str] = None
    mentor_accepted_at: Optional[datetime] = None
    price: float
    currency: str
    payment_id: Optional[str] = None
    payment_status: str
    refund_id: Optional[str] = None
    refund_status: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    student_rating: Optional[int] = None
    mentor_rating: Optional[int] = None
    student_review: Optional[str] = None
    mentor_review: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "BookingResponse":
        def value(member):
            return getattr(member, "value", member)

        return cls(
            id=str(session.id),
            slot_id=session.slot_id,
            student_id=str(session.student_id),
            mentor_id=str(session.mentor_id),
            subject=session.subject,
            session_type=value(session.session_type),
            session_notes=session.session_notes,
            scheduled_time=session.scheduled_time,
            end_time=session.end_time,
            duration=session.duration,
            status=value(session.status),
            auto_decline_at=session.auto_decline_at,
            meeting_url=session.meeting_url,
            meeting_provider=value(session.meeting_provider),
            mentor_accepted_at=session.mentor_accepted_at,
            price=session.price,
            currency=session.currency,
            payment_id=session.payment_id,
            payment_status=value(session.payment_status),
            refund_id=session.refund_id,
            refund_status=value(session.refund_status),
            cancellation_reason=session.cancellation_reason,
            cancelled_by=value(session.cancelled_by),
            cancelled_at=session.cancelled_at,
            student_rating=session.student_rating,
            mentor_rating=session.mentor_rating,
            student_review=session.student_review,
            mentor_review=session.mentor_review,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class BookingListResponse(BaseModel):
    """Response for get user bookings use case"""

    bookings: List[BookingResponse]
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., description="Number of pages at this limit")
