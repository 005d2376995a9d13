from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session, SessionStatus
from src.domain.scheduling import MAX_SESSION_MINUTES, intervals_overlap


def _missing_meeting_link():
    return or_(Session.meeting_url.is_(None), Session.meeting_url == "")


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = (
            select(Session)
            .where(Session.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def update(self, session_obj: Session) -> Session:
        """Update existing session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_active_by_mentor_between(
        self, mentor_id: UUID, start: datetime, end: datetime
    ) -> List[Session]:
        stmt = (
            select(Session)
            .where(
                Session.mentor_id == mentor_id,
                Session.scheduled_time >= start,
                Session.scheduled_time < end,
                Session.status != SessionStatus.cancelled,
            )
            .order_by(Session.scheduled_time)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def find_conflicting(
        self,
        mentor_id: UUID,
        scheduled_time: datetime,
        duration: int,
        exclude_session_id: Optional[UUID] = None,
    ) -> List[Session]:
        """
        Find non-cancelled sessions overlapping the proposed interval.

        The SQL narrows candidates to sessions that start before the proposed
        end and no earlier than the longest possible session before the proposed
        start; the exact half-open overlap is then checked on end_time.
        """
        proposed_end = scheduled_time + timedelta(minutes=duration)
        stmt = select(Session).where(
            Session.mentor_id == mentor_id,
            Session.status != SessionStatus.cancelled,
            Session.scheduled_time < proposed_end,
            Session.scheduled_time > scheduled_time - timedelta(minutes=MAX_SESSION_MINUTES),
        )
        if exclude_session_id is not None:
            stmt = stmt.where(Session.id != exclude_session_id)

        result = await self.session.exec(stmt)
        return [
            s
            for s in result.all()
            if intervals_overlap(scheduled_time, proposed_end, s.scheduled_time, s.end_time)
        ]

    async def transition_status(
        self,
        session_id: UUID,
        expected: Sequence[SessionStatus],
        values: Dict[str, Any],
    ) -> bool:
        """Conditional UPDATE guarded by the current status"""
        stmt = (
            update(Session)
            .where(Session.id == session_id, Session.status.in_(list(expected)))
            .values(**values, updated_at=datetime.utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def get_overdue_pending(self, now: datetime) -> List[Session]:
        stmt = (
            select(Session)
            .where(
                Session.status == SessionStatus.pending_mentor_acceptance,
                Session.auto_decline_at <= now,
            )
            .order_by(Session.auto_decline_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_pending_auto_declining_between(
        self, start: datetime, end: datetime
    ) -> List[Session]:
        stmt = (
            select(Session)
            .where(
                Session.status == SessionStatus.pending_mentor_acceptance,
                Session.auto_decline_at >= start,
                Session.auto_decline_at <= end,
            )
            .order_by(Session.auto_decline_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_confirmed_without_meeting_link_between(
        self, start: datetime, end: datetime
    ) -> List[Session]:
        stmt = (
            select(Session)
            .where(
                Session.status == SessionStatus.confirmed,
                Session.scheduled_time >= start,
                Session.scheduled_time <= end,
                _missing_meeting_link(),
            )
            .order_by(Session.scheduled_time)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_by_status(self, status: SessionStatus) -> int:
        stmt = select(func.count(Session.id)).where(Session.status == status)
        result = await self.session.exec(stmt)
        return result.one()

    async def count_pending_auto_declining_between(
        self, start: datetime, end: datetime
    ) -> int:
        stmt = select(func.count(Session.id)).where(
            Session.status == SessionStatus.pending_mentor_acceptance,
            Session.auto_decline_at >= start,
            Session.auto_decline_at <= end,
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def count_confirmed_without_meeting_link(self) -> int:
        stmt = select(func.count(Session.id)).where(
            Session.status == SessionStatus.confirmed,
            _missing_meeting_link(),
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def get_by_participant(
        self,
        user_id: UUID,
        status_filter: Optional[str],
        now: datetime,
        offset: int,
        limit: int,
    ) -> Tuple[List[Session], int]:
        conditions = [or_(Session.student_id == user_id, Session.mentor_id == user_id)]

        if status_filter == "upcoming":
            conditions.append(Session.scheduled_time > now)
            conditions.append(
                Session.status.not_in([SessionStatus.cancelled, SessionStatus.completed])
            )
        elif status_filter == "completed":
            conditions.append(Session.status == SessionStatus.completed)
        elif status_filter == "cancelled":
            conditions.append(Session.status == SessionStatus.cancelled)

        count_stmt = select(func.count(Session.id)).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()

        stmt = (
            select(Session)
            .where(*conditions)
            .order_by(Session.scheduled_time.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total
