import math
from datetime import datetime
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.scheduling import utcnow

from .dtos import BookingListResponse, BookingResponse

STATUS_FILTERS = ("upcoming", "completed", "cancelled")
MAX_PAGE_SIZE = 100


class GetUserBookingsUseCase:
    """
    List sessions where the user is student or mentor, newest first.

    status: "upcoming" (future, not cancelled or completed), "completed",
    "cancelled", or None for all.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> Result[BookingListResponse]:
        if status is not None and status not in STATUS_FILTERS:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Invalid status filter: {status}. Must be one of: {', '.join(STATUS_FILTERS)}",
                )
            )
        if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}",
                )
            )

        async with self.uow:
            sessions, total = await self.uow.sessions.get_by_participant(
                user_id,
                status,
                now or utcnow(),
                offset=(page - 1) * limit,
                limit=limit,
            )
            return Return.ok(
                BookingListResponse(
                    bookings=[BookingResponse.from_session(s) for s in sessions],
                    total=total,
                    page=page,
                    limit=limit,
                    total_pages=math.ceil(total / limit) if total else 0,
                )
            )
