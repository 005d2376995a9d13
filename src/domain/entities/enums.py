"""
Booking Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Marketplace role of a user"""

    student = "student"
    mentor = "mentor"


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class SessionStatus(str, Enum):
    """Mentoring session lifecycle status"""

    pending_mentor_acceptance = "pending_mentor_acceptance"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class SessionType(str, Enum):
    """How the session is held"""

    video = "video"
    audio = "audio"
    in_person = "in-person"


class MeetingProvider(str, Enum):
    """Video meeting provider of a session's meeting link"""

    google_meet = "google_meet"
    zoom = "zoom"
    teams = "teams"
    other = "other"


class PaymentStatus(str, Enum):
    """Status of the charge backing a session"""

    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class RefundStatus(str, Enum):
    """Status of the refund requested on cancellation"""

    pending = "pending"
    processed = "processed"
    failed = "failed"


class CancelledBy(str, Enum):
    """Party that cancelled a session"""

    student = "student"
    mentor = "mentor"
    system = "system"
