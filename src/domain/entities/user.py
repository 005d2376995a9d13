"""
User Entity

Represents a marketplace participant (student or mentor).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import UserRole, UserStatus


class User(SQLModel, table=True):
    """
    User entity - a student or a mentor.

    Business Rules:
    - Email must be unique across all users
    - Booking code only checks existence and reads display fields
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    role: UserRole = Field(default=UserRole.student)
    status: UserStatus = Field(default=UserStatus.active)
    timezone: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_role", "role"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email
