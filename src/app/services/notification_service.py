from abc import ABC, abstractmethod

from src.domain.entities import CancelledBy, Session, User


class INotificationService(ABC):
    """
    Outbound notifications to session participants.

    Delivery is best-effort: callers log failures and never surface them.
    """

    @abstractmethod
    async def send_booking_confirmation(
        self, session: Session, student: User, mentor: User
    ) -> None:
        pass

    @abstractmethod
    async def send_session_acceptance(
        self, session: Session, student: User, mentor: User
    ) -> None:
        pass

    @abstractmethod
    async def send_cancellation_notification(
        self, session: Session, student: User, mentor: User, cancelled_by: CancelledBy
    ) -> None:
        pass

    @abstractmethod
    async def send_auto_cancellation_notification(
        self, session: Session, student: User, mentor: User
    ) -> None:
        pass
