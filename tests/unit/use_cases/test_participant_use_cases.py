"""Cancel, accept, start/complete, rating and listing from a participant's side"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.use_cases.bookings import (
    AcceptBookingUseCase,
    CancelBookingUseCase,
    CompleteSessionUseCase,
    GetBookingDetailsUseCase,
    GetUserBookingsUseCase,
    RateSessionUseCase,
    StartSessionUseCase,
)
from src.domain.entities import SessionStatus

MEET_URL = "https://meet.google.com/abc-defg-hij"


@pytest.fixture
def stored(mock_uow, users_by_id, make_session):
    """Return a helper that makes get_by_id serve the given session"""

    def _store(session):
        mock_uow.sessions.get_by_id = AsyncMock(return_value=session)
        return session

    return _store


class TestCancelBooking:
    @pytest.mark.asyncio
    async def test_student_cancel_is_attributed_to_student(
        self, mock_uow, lifecycle, stored, make_session, student
    ):
        session = stored(make_session())

        result = await CancelBookingUseCase(mock_uow, lifecycle).execute(
            session.id, student.id, "Exam clash"
        )

        assert result.value.status == "cancelled"
        assert result.value.cancelled_by == "student"
        assert result.value.cancellation_reason == "Exam clash"
        assert result.value.refund_status == "processed"

    @pytest.mark.asyncio
    async def test_mentor_cancel_is_attributed_to_mentor(
        self, mock_uow, lifecycle, stored, make_session, mentor
    ):
        session = stored(make_session(status=SessionStatus.confirmed))

        result = await CancelBookingUseCase(mock_uow, lifecycle).execute(session.id, mentor.id)

        assert result.value.cancelled_by == "mentor"
        assert result.value.cancellation_reason == "No reason provided"

    @pytest.mark.asyncio
    async def test_outsider_is_forbidden(self, mock_uow, lifecycle, stored, make_session):
        session = stored(make_session())

        result = await CancelBookingUseCase(mock_uow, lifecycle).execute(session.id, uuid4())

        assert result.error.code == "FORBIDDEN"
        mock_uow.sessions.transition_status.assert_not_awaited()


class TestAcceptBooking:
    @pytest.mark.asyncio
    async def test_mentor_confirms_with_link(self, mock_uow, lifecycle, stored, make_session, mentor):
        session = stored(make_session())

        result = await AcceptBookingUseCase(mock_uow, lifecycle).execute(
            session.id, mentor.id, MEET_URL
        )

        assert result.value.status == "confirmed"
        assert result.value.meeting_url == MEET_URL
        assert result.value.meeting_provider == "google_meet"
        assert result.value.mentor_accepted_at is not None

    @pytest.mark.asyncio
    async def test_student_cannot_accept(self, mock_uow, lifecycle, stored, make_session, student):
        session = stored(make_session())

        result = await AcceptBookingUseCase(mock_uow, lifecycle).execute(
            session.id, student.id, MEET_URL
        )

        assert result.error.code == "FORBIDDEN"


class TestStartAndComplete:
    @pytest.mark.asyncio
    async def test_mentor_runs_session_to_completion(
        self, mock_uow, lifecycle, stored, make_session, mentor
    ):
        session = stored(make_session(status=SessionStatus.confirmed, meeting_url=MEET_URL))

        started = await StartSessionUseCase(mock_uow, lifecycle).execute(session.id, mentor.id)
        completed = await CompleteSessionUseCase(mock_uow, lifecycle).execute(session.id, mentor.id)

        assert started.value.status == "in_progress"
        assert completed.value.status == "completed"

    @pytest.mark.asyncio
    async def test_student_cannot_start(self, mock_uow, lifecycle, stored, make_session, student):
        session = stored(make_session(status=SessionStatus.confirmed))

        result = await StartSessionUseCase(mock_uow, lifecycle).execute(session.id, student.id)

        assert result.error.code == "FORBIDDEN"


class TestRateSession:
    @pytest.mark.asyncio
    async def test_each_party_rates_once(self, mock_uow, stored, make_session, student, mentor):
        session = stored(make_session(status=SessionStatus.completed))
        use_case = RateSessionUseCase(mock_uow)

        by_student = await use_case.execute(session.id, student.id, 5, "Very helpful")
        by_mentor = await use_case.execute(session.id, mentor.id, 4)
        again = await use_case.execute(session.id, student.id, 3)

        assert by_student.value.student_rating == 5
        assert by_student.value.student_review == "Very helpful"
        assert by_mentor.value.mentor_rating == 4
        assert again.error.code == "ALREADY_RATED"
        assert session.student_rating == 5

    @pytest.mark.asyncio
    async def test_only_completed_sessions(self, mock_uow, stored, make_session, student):
        session = stored(make_session(status=SessionStatus.confirmed))

        result = await RateSessionUseCase(mock_uow).execute(session.id, student.id, 5)

        assert result.error.code == "SESSION_NOT_COMPLETED"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range(self, mock_uow, stored, make_session, student, rating):
        session = stored(make_session(status=SessionStatus.completed))

        result = await RateSessionUseCase(mock_uow).execute(session.id, student.id, rating)

        assert result.error.code == "VALIDATION_ERROR"
        mock_uow.commit.assert_not_awaited()


class TestListings:
    @pytest.mark.asyncio
    async def test_pagination_metadata(self, mock_uow, make_session, student):
        sessions = [make_session(), make_session()]
        mock_uow.sessions.get_by_participant = AsyncMock(return_value=(sessions, 23))

        result = await GetUserBookingsUseCase(mock_uow).execute(
            student.id, status="upcoming", page=3, limit=10
        )

        listing = result.value
        assert len(listing.bookings) == 2
        assert (listing.total, listing.page, listing.limit, listing.total_pages) == (23, 3, 10, 3)
        kwargs = mock_uow.sessions.get_by_participant.await_args.kwargs
        assert (kwargs["offset"], kwargs["limit"]) == (20, 10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,page,limit",
        [("archived", 1, 10), (None, 0, 10), (None, 1, 101)],
    )
    async def test_rejects_bad_filters(self, mock_uow, student, status, page, limit):
        result = await GetUserBookingsUseCase(mock_uow).execute(
            student.id, status=status, page=page, limit=limit
        )

        assert result.error.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_details_hidden_from_outsiders(self, mock_uow, stored, make_session, student):
        session = stored(make_session())

        mine = await GetBookingDetailsUseCase(mock_uow).execute(session.id, student.id)
        theirs = await GetBookingDetailsUseCase(mock_uow).execute(session.id, uuid4())

        assert mine.value.id == str(session.id)
        assert theirs.error.code == "FORBIDDEN"
