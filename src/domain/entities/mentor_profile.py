"""
MentorProfile Entity

Mentor pricing and recurring weekly availability.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel


class MentorProfile(SQLModel, table=True):
    """
    MentorProfile entity - owned by the mentor, read-only for booking.

    weekly_schedule maps a lowercase weekday name to an ordered list of blocks:
        {"monday": [{"startTime": "09:00", "endTime": "11:00", "isAvailable": true}]}
    """

    __tablename__ = "mentor_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", unique=True, index=True)

    display_name: Optional[str] = Field(default=None, max_length=200)
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    currency: str = Field(default="INR", max_length=3)
    weekly_schedule: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
