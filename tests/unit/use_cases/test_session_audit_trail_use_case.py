from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.use_cases.audit import GetSessionAuditTrailUseCase
from src.domain.entities import AuditEvent


@pytest.mark.asyncio
async def test_trail_names_actors_and_leaves_system_events_anonymous(
    mock_uow, users_by_id, make_session, student, mentor
):
    session = make_session()
    mock_uow.sessions.get_by_id = AsyncMock(return_value=session)
    mock_uow.audit_events.get_by_session_id = AsyncMock(
        return_value=[
            AuditEvent(
                session_id=session.id,
                actor_id=student.id,
                action="booking_created",
                created_at=datetime(2030, 6, 2, 20, 0),
            ),
            AuditEvent(
                session_id=session.id,
                actor_id=None,
                action="session_auto_declined",
                event_metadata={"from": "pending_mentor_acceptance", "to": "cancelled"},
                created_at=datetime(2030, 6, 3, 7, 0),
            ),
        ]
    )

    result = await GetSessionAuditTrailUseCase(mock_uow).execute(session.id, mentor.id)

    events = result.value["events"]
    assert [e["actor_email"] for e in events] == ["student@example.com", None]
    assert events[0]["timestamp"] == "2030-06-02T20:00:00Z"
    assert events[0]["metadata"] == {}
    assert events[1]["metadata"]["to"] == "cancelled"


@pytest.mark.asyncio
async def test_trail_hidden_from_outsiders(mock_uow, make_session):
    session = make_session()
    mock_uow.sessions.get_by_id = AsyncMock(return_value=session)

    result = await GetSessionAuditTrailUseCase(mock_uow).execute(session.id, uuid4())

    assert result.error.code == "FORBIDDEN"
    mock_uow.audit_events.get_by_session_id.assert_not_awaited()
