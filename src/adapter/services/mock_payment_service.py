"""
Mock Payment Gateway

Stands in for the real card processor. Accepts any well-formed payment
method reference and issues opaque payment/refund ids.
"""

import logging
from typing import Optional
from uuid import uuid4

from src.app.services.payment_service import IPaymentService, PaymentResult, RefundResult

logger = logging.getLogger(__name__)


class MockPaymentService(IPaymentService):
    """In-process payment gateway used until a real processor is wired in"""

    PAYMENT_METHOD_PREFIX = "pm_"
    PAYMENT_ID_PREFIX = "pay_"
    REFUND_ID_PREFIX = "ref_"

    def validate_payment_method(self, payment_method_id: Optional[str]) -> bool:
        return bool(payment_method_id) and (
            payment_method_id.startswith(self.PAYMENT_METHOD_PREFIX)
            and len(payment_method_id) > 10
        )

    async def charge(
        self,
        amount: float,
        currency: str,
        payment_method_id: str,
        description: str,
    ) -> PaymentResult:
        if amount <= 0:
            return PaymentResult(success=False, error="Amount must be positive")
        if not self.validate_payment_method(payment_method_id):
            return PaymentResult(success=False, error="Invalid payment method")

        payment_id = f"{self.PAYMENT_ID_PREFIX}{uuid4().hex[:24]}"
        logger.info(f"Charged {amount} {currency} ({description}): {payment_id}")
        return PaymentResult(success=True, payment_id=payment_id)

    async def refund(self, payment_id: str, amount: Optional[float] = None) -> RefundResult:
        if not payment_id or not payment_id.startswith(self.PAYMENT_ID_PREFIX):
            return RefundResult(success=False, error="Invalid payment ID")

        refund_id = f"{self.REFUND_ID_PREFIX}{uuid4().hex[:24]}"
        logger.info(
            f"Refunded {'full amount' if amount is None else amount} of {payment_id}: {refund_id}"
        )
        return RefundResult(success=True, refund_id=refund_id)
