"""
Get Session Audit Trail Use Case

Retrieves the lifecycle events of one session for its participants.
"""

from typing import Any, Dict, List
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bookings.session_access import load_session_for_participant


class GetSessionAuditTrailUseCase:
    """
    Use case for retrieving a session's audit trail.

    Business Rules:
    - Only the session's student or mentor may read it
    - Results ordered oldest first
    - System events (auto-decline, operator decline) have no actor email
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: UUID, user_id: UUID) -> Result[Dict[str, Any]]:
        async with self.uow:
            loaded = await load_session_for_participant(self.uow, session_id, user_id)
            if loaded.is_err():
                return loaded

            events = await self.uow.audit_events.get_by_session_id(session_id)

            emails: Dict[UUID, str] = {}
            events_list: List[Dict[str, Any]] = []
            for event in events:
                actor_email = None
                if event.actor_id:
                    if event.actor_id not in emails:
                        actor = await self.uow.users.get_by_id(event.actor_id)
                        emails[event.actor_id] = actor.email if actor else None
                    actor_email = emails[event.actor_id]

                events_list.append(
                    {
                        "action": event.action,
                        "actor_email": actor_email,
                        "timestamp": event.created_at.isoformat() + "Z",
                        "metadata": event.event_metadata or {},
                    }
                )

            return Return.ok({"session_id": str(session_id), "events": events_list})
