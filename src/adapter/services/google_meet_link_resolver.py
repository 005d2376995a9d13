import re
from typing import Optional

from src.app.services.meeting_link_resolver import IMeetingLinkResolver
from src.domain.entities import MeetingProvider

_MEET_CODE = re.compile(r"^https://meet\.google\.com/[a-z]{3}-[a-z]{4}-[a-z]{3}$")
_MEET_LOOKUP = re.compile(r"^https://meet\.google\.com/lookup/[A-Za-z0-9_-]+$")


class GoogleMeetLinkResolver(IMeetingLinkResolver):
    """Accepts Google Meet room links and lookup links only"""

    async def resolve(self, url: str) -> Optional[MeetingProvider]:
        if not isinstance(url, str):
            return None
        candidate = url.strip()
        if _MEET_CODE.match(candidate) or _MEET_LOOKUP.match(candidate):
            return MeetingProvider.google_meet
        return None
