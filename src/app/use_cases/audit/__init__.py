"""
Audit Use Cases

Read access to session lifecycle events.
"""

from .get_session_audit_trail_use_case import GetSessionAuditTrailUseCase

__all__ = [
    "GetSessionAuditTrailUseCase",
]
