from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.mentor_profile_repository import IMentorProfileRepository
from src.domain.entities import MentorProfile


class MentorProfileRepository(IMentorProfileRepository):
    """MentorProfile repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> Optional[MentorProfile]:
        stmt = select(MentorProfile).where(MentorProfile.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, profile: MentorProfile) -> MentorProfile:
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile
