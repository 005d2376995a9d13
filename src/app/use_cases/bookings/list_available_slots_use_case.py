"""
List Available Slots Use Case

Generates a mentor's bookable slots for a date and flags those already taken.
"""

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.scheduling import (
    BookingPolicy,
    conflict_window,
    filter_conflicts,
    generate_slots,
    utcnow,
)

from .dtos import AvailableSlotsResponse

logger = logging.getLogger(__name__)


class ListAvailableSlotsUseCase:
    """
    Use case for listing a mentor's slots on a date.

    Business Rules:
    - Slots come from the mentor's weekly availability for that weekday
    - Slots starting within the lead buffer from now are not offered
    - Slots overlapping a non-cancelled session are returned with is_available=False
    - Past dates yield an empty list
    """

    def __init__(self, uow: UnitOfWork, policy: BookingPolicy = BookingPolicy()):
        self.uow = uow
        self.policy = policy

    async def execute(
        self, mentor_id: UUID, target_date: date, now: Optional[datetime] = None
    ) -> Result[AvailableSlotsResponse]:
        now = now or utcnow()

        async with self.uow:
            profile = await self.uow.mentor_profiles.get_by_user_id(mentor_id)
            if profile is None:
                return Return.err(Error("MENTOR_NOT_FOUND", "Mentor profile not found"))

            slots = generate_slots(
                mentor_id,
                profile.weekly_schedule,
                target_date,
                now,
                hourly_rate=profile.hourly_rate,
                policy=self.policy,
            )

            if slots:
                window_start, window_end = conflict_window(target_date)
                sessions = await self.uow.sessions.get_active_by_mentor_between(
                    mentor_id, window_start, window_end
                )
                slots = filter_conflicts(slots, sessions)

            logger.debug(
                f"{len(slots)} slot(s) for mentor {mentor_id} on {target_date.isoformat()}"
            )
            return Return.ok(
                AvailableSlotsResponse(
                    mentor_id=str(mentor_id),
                    date=target_date.isoformat(),
                    slots=slots,
                )
            )
