from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from libs.result import Error
from src.api.error import ClientError, raise_for_error
from src.app.services.payment_service import IPaymentService
from src.app.services.session_lifecycle_manager import SessionLifecycleManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bookings import (
    AcceptBookingUseCase,
    AvailableSlotsResponse,
    BookingListResponse,
    BookingResponse,
    CancelBookingUseCase,
    CompleteSessionUseCase,
    CreateBookingCommand,
    CreateBookingUseCase,
    GetBookingDetailsUseCase,
    GetUserBookingsUseCase,
    ListAvailableSlotsUseCase,
    RateSessionUseCase,
    RescheduleBookingUseCase,
    StartSessionUseCase,
)
from src.depends import (
    get_booking_policy,
    get_current_user,
    get_payment_service,
    get_session_lifecycle_manager,
    get_unit_of_work,
)
from src.domain.scheduling import BookingPolicy

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def current_user_id(current_user: dict) -> UUID:
    try:
        return UUID(current_user["user_id"])
    except (KeyError, ValueError):
        raise ClientError(
            Error("INVALID_TOKEN", "Token does not carry a valid user ID"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


@router.get(
    "/available-slots",
    status_code=status.HTTP_200_OK,
    response_model=AvailableSlotsResponse,
)
async def get_available_slots(
    mentor_id: UUID = Query(..., description="Mentor user ID"),
    target_date: date = Query(..., alias="date", description="Target date (YYYY-MM-DD)"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: BookingPolicy = Depends(get_booking_policy),
):
    """
    List Available Slots

    Slots generated from the mentor's weekly availability for the date, with
    is_available=False on slots already taken by a session.

    Raises:
        - 404 Not Found: MENTOR_NOT_FOUND
    """
    use_case = ListAvailableSlotsUseCase(uow, policy)
    result = await use_case.execute(mentor_id, target_date)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class CreateBookingRequest(BaseModel):
    """
    Create booking HTTP request payload

    scheduled_time must be the start of a slot returned by /available-slots.
    """

    mentor_id: str = Field(..., description="Mentor user ID")
    scheduled_time: datetime = Field(..., description="Slot start (UTC)")
    subject: str = Field(..., max_length=200)
    session_type: str = Field("video", description="video, audio or in-person")
    session_notes: Optional[str] = Field(None, max_length=1000)
    payment_method_id: Optional[str] = Field(None, description="Payment method reference")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookingResponse)
async def create_booking(
    request: CreateBookingRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
    payments: IPaymentService = Depends(get_payment_service),
    policy: BookingPolicy = Depends(get_booking_policy),
):
    """
    Create Booking

    Books a slot for the authenticated student. The session is created in
    pending_mentor_acceptance and auto-declines two hours before it starts
    unless the mentor accepts.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, LEAD_TIME_VIOLATION, SLOT_UNAVAILABLE
        - 402 Payment Required: PAYMENT_FAILED
        - 404 Not Found: MENTOR_NOT_FOUND, STUDENT_NOT_FOUND
        - 409 Conflict: SLOT_CONFLICT
    """
    student_id = current_user_id(current_user)

    use_case = CreateBookingUseCase(uow, lifecycle, payments, policy)
    result = await use_case.execute(
        student_id, CreateBookingCommand(**request.model_dump())
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=BookingListResponse)
async def get_user_bookings(
    status_filter: Optional[str] = Query(
        None, alias="status", description="upcoming, completed or cancelled"
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List My Bookings

    Sessions where the caller is student or mentor, newest first.
    """
    use_case = GetUserBookingsUseCase(uow)
    result = await use_case.execute(
        current_user_id(current_user), status_filter, page, limit
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{session_id}", status_code=status.HTTP_200_OK, response_model=BookingResponse
)
async def get_booking_details(
    session_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Booking Details

    Raises:
        - 403 Forbidden: caller is not a participant
        - 404 Not Found: SESSION_NOT_FOUND
    """
    use_case = GetBookingDetailsUseCase(uow)
    result = await use_case.execute(session_id, current_user_id(current_user))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class MeetingUrlRequest(BaseModel):
    meeting_url: str = Field(..., description="Google Meet link")


@router.put(
    "/{session_id}/meeting-url",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def set_meeting_url(
    session_id: UUID,
    request: MeetingUrlRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """
    Accept Booking With Meeting Link

    The mentor confirms a pending session (or replaces the link of a
    confirmed one).

    Raises:
        - 400 Bad Request: INVALID_MEETING_URL
        - 403 Forbidden: caller is not the mentor
        - 404 Not Found: SESSION_NOT_FOUND
        - 409 Conflict: INVALID_STATUS_TRANSITION
    """
    use_case = AcceptBookingUseCase(uow, lifecycle)
    result = await use_case.execute(
        session_id, current_user_id(current_user), request.meeting_url
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class CancelBookingRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


@router.put(
    "/{session_id}/cancel",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def cancel_booking(
    session_id: UUID,
    request: CancelBookingRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """
    Cancel Booking

    Paid sessions are refunded; a failed refund shows as refund_status=failed.

    Raises:
        - 403 Forbidden: caller is not a participant
        - 404 Not Found: SESSION_NOT_FOUND
        - 409 Conflict: INVALID_STATUS_TRANSITION
    """
    use_case = CancelBookingUseCase(uow, lifecycle)
    result = await use_case.execute(
        session_id, current_user_id(current_user), request.reason
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class RescheduleBookingRequest(BaseModel):
    scheduled_time: datetime = Field(..., description="New slot start (UTC)")


@router.put(
    "/{session_id}/reschedule",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def reschedule_booking(
    session_id: UUID,
    request: RescheduleBookingRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    policy: BookingPolicy = Depends(get_booking_policy),
):
    """
    Reschedule Booking

    The student moves a booking still awaiting mentor acceptance.

    Raises:
        - 400 Bad Request: LEAD_TIME_VIOLATION, SLOT_UNAVAILABLE
        - 403 Forbidden: caller is not the student
        - 404 Not Found: SESSION_NOT_FOUND
        - 409 Conflict: SLOT_CONFLICT, INVALID_STATUS_TRANSITION
    """
    use_case = RescheduleBookingUseCase(uow, policy)
    result = await use_case.execute(
        session_id, current_user_id(current_user), request.scheduled_time
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{session_id}/start",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def start_session(
    session_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """Mentor starts a confirmed session"""
    use_case = StartSessionUseCase(uow, lifecycle)
    result = await use_case.execute(session_id, current_user_id(current_user))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{session_id}/complete",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def complete_session(
    session_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    lifecycle: SessionLifecycleManager = Depends(get_session_lifecycle_manager),
):
    """Mentor completes an in-progress session"""
    use_case = CompleteSessionUseCase(uow, lifecycle)
    result = await use_case.execute(session_id, current_user_id(current_user))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class RateSessionRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=1000)


@router.post(
    "/{session_id}/rate",
    status_code=status.HTTP_200_OK,
    response_model=BookingResponse,
)
async def rate_session(
    session_id: UUID,
    request: RateSessionRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Rate Session

    Raises:
        - 403 Forbidden: caller is not a participant
        - 404 Not Found: SESSION_NOT_FOUND
        - 409 Conflict: SESSION_NOT_COMPLETED, ALREADY_RATED
    """
    use_case = RateSessionUseCase(uow)
    result = await use_case.execute(
        session_id, current_user_id(current_user), request.rating, request.review
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
