from datetime import date, datetime, timedelta
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.mentor_profile_repository import MentorProfileRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import generate_jwt
from src.depends import get_unit_of_work
from src.domain.entities import MentorProfile, Session, User, UserRole

from tests.fixtures.schedules import WEEKDAY_MORNINGS


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def people(db_session):
    """
    A student, a mentor with a profile (09:00-11:00 every day, 500 INR/h)
    and an unrelated user. Returns their ids as strings.
    """
    student = User(email="asha@example.com", first_name="Asha", last_name="Rao")
    mentor = User(
        email="vikram@example.com",
        first_name="Vikram",
        last_name="Iyer",
        role=UserRole.mentor,
    )
    outsider = User(email="noor@example.com", first_name="Noor", last_name="Khan")
    users = UserRepository(db_session)
    for user in (student, mentor, outsider):
        await users.create(user)
    await MentorProfileRepository(db_session).create(
        MentorProfile(
            user_id=mentor.id,
            display_name=mentor.full_name,
            hourly_rate=500.0,
            currency="INR",
            weekly_schedule=WEEKDAY_MORNINGS,
        )
    )
    await db_session.commit()
    return {
        "student_id": str(student.id),
        "mentor_id": str(mentor.id),
        "outsider_id": str(outsider.id),
    }


def bearer(user_id: str, role: str = "student") -> dict:
    return {"Authorization": f"Bearer {generate_jwt(user_id, role)}"}


@pytest.fixture
def student_headers(people):
    return bearer(people["student_id"])


@pytest.fixture
def mentor_headers(people):
    return bearer(people["mentor_id"], "mentor")


@pytest.fixture
def outsider_headers(people):
    return bearer(people["outsider_id"])


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest.fixture
def booking_day() -> date:
    """A day far enough ahead that every slot clears the lead time"""
    return (datetime.utcnow() + timedelta(days=7)).date()


@pytest.fixture
def insert_session(db_session, people):
    """Insert a pending paid session directly and return its id as a string"""

    async def _insert(scheduled_time: datetime, price: float = 500.0) -> str:
        session = Session.book(
            student_id=UUID(people["student_id"]),
            mentor_id=UUID(people["mentor_id"]),
            slot_id=f"{people['mentor_id']}-0",
            subject="Career guidance",
            scheduled_time=scheduled_time,
            duration=60,
            price=price,
            currency="INR",
            payment_id="pay_0123456789abcdef01234567",
        )
        db_session.add(session)
        await db_session.commit()
        return str(session.id)

    return _insert
