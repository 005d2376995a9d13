"""
Booking Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserRole,
    UserStatus,
    SessionStatus,
    SessionType,
    MeetingProvider,
    PaymentStatus,
    RefundStatus,
    CancelledBy,
)

# Export all entities
from .user import User
from .mentor_profile import MentorProfile
from .session import Session
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserRole",
    "UserStatus",
    "SessionStatus",
    "SessionType",
    "MeetingProvider",
    "PaymentStatus",
    "RefundStatus",
    "CancelledBy",
    # Entities
    "User",
    "MentorProfile",
    "Session",
    "AuditEvent",
]
