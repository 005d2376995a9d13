from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import MentorProfile


class IMentorProfileRepository(ABC):
    """MentorProfile repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[MentorProfile]:
        """Get the profile (pricing, weekly schedule) of a mentor user"""
        pass

    @abstractmethod
    async def create(self, profile: MentorProfile) -> MentorProfile:
        """Create a mentor profile"""
        pass
