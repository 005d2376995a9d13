from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_admin_endpoints_require_api_key(client: AsyncClient):
    missing = await client.get("/admin/sessions/monitoring-stats")
    wrong = await client.get(
        "/admin/sessions/monitoring-stats", headers={"X-Admin-API-Key": "nope"}
    )

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_run_auto_decline(
    client: AsyncClient, insert_session, admin_headers, student_headers
):
    """Auto-Decline

    Given a pending paid session starting in one hour (deadline passed an hour ago)
    And a pending session three days out
    When an operator runs the auto-decline cycle
    Then only the overdue session is cancelled by the system and refunded
    """
    overdue = await insert_session(datetime.utcnow() + timedelta(hours=1))
    later = await insert_session(datetime.utcnow() + timedelta(days=3))

    response = await client.post("/admin/sessions/auto-decline/run", headers=admin_headers)

    assert response.status_code == 200
    summary = response.json()
    assert summary["checked"] == 1
    assert summary["declined"] == 1
    assert summary["declined_session_ids"] == [overdue]

    details = (await client.get(f"/bookings/{overdue}", headers=student_headers)).json()
    assert details["status"] == "cancelled"
    assert details["cancelled_by"] == "system"
    assert details["cancellation_reason"] == "Auto-cancelled: mentor did not respond in time"
    assert details["refund_status"] == "processed"

    untouched = (await client.get(f"/bookings/{later}", headers=student_headers)).json()
    assert untouched["status"] == "pending_mentor_acceptance"


@pytest.mark.asyncio
async def test_monitoring_stats_and_near_auto_decline(
    client: AsyncClient, insert_session, admin_headers
):
    near = await insert_session(datetime.utcnow() + timedelta(hours=2, minutes=30))
    await insert_session(datetime.utcnow() + timedelta(days=3))

    stats = await client.get("/admin/sessions/monitoring-stats", headers=admin_headers)
    listing = await client.get(
        "/admin/sessions/near-auto-decline",
        params={"minutes_ahead": 60},
        headers=admin_headers,
    )

    assert stats.status_code == 200
    assert stats.json()["is_running"] is False
    assert stats.json()["pending_sessions"] == 2
    assert stats.json()["sessions_near_auto_decline"] == 1
    assert listing.json()["count"] == 1
    assert listing.json()["sessions"][0]["id"] == near


@pytest.mark.asyncio
async def test_manual_decline(client: AsyncClient, insert_session, admin_headers):
    session_id = await insert_session(datetime.utcnow() + timedelta(days=3))

    response = await client.post(
        f"/admin/sessions/{session_id}/decline",
        json={"reason": "Mentor on leave"},
        headers=admin_headers,
    )
    again = await client.post(
        f"/admin/sessions/{session_id}/decline",
        json={"reason": "Mentor on leave"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["cancellation_reason"] == "Manually cancelled: Mentor on leave"
    assert response.json()["refund_status"] == "processed"
    assert again.status_code == 409
