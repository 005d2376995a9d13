from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import MeetingProvider


class IMeetingLinkResolver(ABC):
    """Validates meeting URLs supplied by mentors on acceptance"""

    @abstractmethod
    async def resolve(self, url: str) -> Optional[MeetingProvider]:
        """
        Identify the provider of an allow-listed meeting URL.

        Returns:
            The provider, or None when the URL is not an accepted meeting link
        """
        pass
