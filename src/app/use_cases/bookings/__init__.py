"""Booking use cases: slots, booking, lifecycle transitions and listings."""

from .accept_booking_use_case import AcceptBookingUseCase
from .cancel_booking_use_case import CancelBookingUseCase
from .complete_session_use_case import CompleteSessionUseCase
from .create_booking_use_case import CreateBookingUseCase
from .dtos import (
    AvailableSlotsResponse,
    BookingListResponse,
    BookingResponse,
    CreateBookingCommand,
)
from .get_booking_details_use_case import GetBookingDetailsUseCase
from .get_user_bookings_use_case import GetUserBookingsUseCase
from .list_available_slots_use_case import ListAvailableSlotsUseCase
from .rate_session_use_case import RateSessionUseCase
from .reschedule_booking_use_case import RescheduleBookingUseCase
from .start_session_use_case import StartSessionUseCase

__all__ = [
    "ListAvailableSlotsUseCase",
    "CreateBookingUseCase",
    "AcceptBookingUseCase",
    "CancelBookingUseCase",
    "RescheduleBookingUseCase",
    "StartSessionUseCase",
    "CompleteSessionUseCase",
    "RateSessionUseCase",
    "GetUserBookingsUseCase",
    "GetBookingDetailsUseCase",
    "AvailableSlotsResponse",
    "BookingListResponse",
    "BookingResponse",
    "CreateBookingCommand",
]
