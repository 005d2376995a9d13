from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class PaymentResult(BaseModel):
    """Outcome of a charge request"""

    success: bool
    payment_id: Optional[str] = None
    error: Optional[str] = None


class RefundResult(BaseModel):
    """Outcome of a refund request"""

    success: bool
    refund_id: Optional[str] = None
    error: Optional[str] = None


class IPaymentService(ABC):
    """
    Payment gateway interface - application layer

    Implementations report gateway declines through the result object and
    reserve exceptions for transport failures. Callers do not retry.
    """

    @abstractmethod
    async def charge(
        self,
        amount: float,
        currency: str,
        payment_method_id: str,
        description: str,
    ) -> PaymentResult:
        pass

    @abstractmethod
    async def refund(self, payment_id: str, amount: Optional[float] = None) -> RefundResult:
        """Refund a previous charge, in full when amount is None"""
        pass
