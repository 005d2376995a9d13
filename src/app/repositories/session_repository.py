from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from src.domain.entities import Session, SessionStatus


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """
        Insert a new session.

        Raises:
            sqlalchemy.exc.IntegrityError: another non-cancelled session already
                holds (mentor_id, scheduled_time)
        """
        pass

    @abstractmethod
    async def update(self, session: Session) -> Session:
        """Update existing session"""
        pass

    @abstractmethod
    async def get_active_by_mentor_between(
        self, mentor_id: UUID, start: datetime, end: datetime
    ) -> List[Session]:
        """Non-cancelled sessions of a mentor with scheduled_time in [start, end)"""
        pass

    @abstractmethod
    async def find_conflicting(
        self,
        mentor_id: UUID,
        scheduled_time: datetime,
        duration: int,
        exclude_session_id: Optional[UUID] = None,
    ) -> List[Session]:
        """Non-cancelled sessions of a mentor overlapping [scheduled_time, +duration)"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        session_id: UUID,
        expected: Sequence[SessionStatus],
        values: Dict[str, Any],
    ) -> bool:
        """
        Compare-and-set: apply values only if the stored status is in expected.

        Returns True if this call performed the transition, False if the session
        is missing or was already moved by someone else.
        """
        pass

    @abstractmethod
    async def get_overdue_pending(self, now: datetime) -> List[Session]:
        """Pending sessions whose auto_decline_at <= now"""
        pass

    @abstractmethod
    async def get_pending_auto_declining_between(
        self, start: datetime, end: datetime
    ) -> List[Session]:
        """Pending sessions with auto_decline_at in [start, end], soonest first"""
        pass

    @abstractmethod
    async def get_confirmed_without_meeting_link_between(
        self, start: datetime, end: datetime
    ) -> List[Session]:
        """Confirmed sessions starting in [start, end] with no meeting link"""
        pass

    @abstractmethod
    async def count_by_status(self, status: SessionStatus) -> int:
        pass

    @abstractmethod
    async def count_pending_auto_declining_between(
        self, start: datetime, end: datetime
    ) -> int:
        pass

    @abstractmethod
    async def count_confirmed_without_meeting_link(self) -> int:
        pass

    @abstractmethod
    async def get_by_participant(
        self,
        user_id: UUID,
        status_filter: Optional[str],
        now: datetime,
        offset: int,
        limit: int,
    ) -> Tuple[List[Session], int]:
        """
        Sessions where the user is student or mentor, newest first.

        status_filter: None, "upcoming", "completed" or "cancelled"

        Returns:
            Tuple of (page of sessions, total matching count)
        """
        pass
