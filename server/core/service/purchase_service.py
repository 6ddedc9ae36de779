"""
Purchase lifecycle: create order -> verify payment -> issue download token.

    NONE -> PENDING -> REDEEMED(downloaded=False) -> REDEEMED(downloaded=True)
            PENDING -> EXPIRED

A rejected or undeterminable verification leaves the order PENDING so the
customer can retry until it expires.
"""
from dataclasses import dataclass
from typing import Optional

import logfire
from fastapi.concurrency import run_in_threadpool

from server.core.errors import RejectedPaymentError, ValidationError
from server.core.models.order_models import RedemptionRecord
from server.core.service.delivery.content_delivery import ContentDelivery, bundle_url
from server.core.service.ledger.order_ledger import CreatedOrder, OrderLedger, validate_customer
from server.core.service.ledger.redemption_ledger import RedemptionLedger
from server.core.service.payment_verification.verifiers import PaymentVerifier, VerificationInput


@dataclass(frozen=True)
class PurchaseConfirmation:
    record: RedemptionRecord
    download_url: str
    item_urls: list[str]


class PurchaseService:
    """Coordinates the ledgers and the verifier. Holds no state of its own."""

    def __init__(
        self,
        orders: OrderLedger,
        redemptions: RedemptionLedger,
        verifier: PaymentVerifier,
        delivery: ContentDelivery,
    ):
        self.orders = orders
        self.redemptions = redemptions
        self.verifier = verifier
        self.delivery = delivery

    async def create_order(self, full_name: Optional[str], email: Optional[str], mobile: Optional[str],
                           package_id: Optional[str]) -> CreatedOrder:
        customer = validate_customer(full_name, email, mobile)
        if not (package_id or "").strip():
            raise ValidationError("packageId is required")
        return await self.orders.create_order(customer, package_id.strip())

    async def verify_payment(self, data: VerificationInput) -> PurchaseConfirmation:
        """
        Verify the payment for a pending order and redeem it.

        Raises:
            ValidationError: no order id supplied
            OrderNotFoundError: unknown, expired or already redeemed order
            RejectedPaymentError: the gateway or signature says no
            GatewayError: the outcome could not be determined
        """
        if not data.order_id:
            raise ValidationError("Order id is required")

        # Cheap existence check so unknown orders never reach the gateway
        self.orders.peek(data.order_id)

        result = await self.verifier.verify(data)
        if not result.verified:
            logfire.warning(f"Payment rejected for order {data.order_id}: {result.reason}")
            raise RejectedPaymentError(result.reason or "Payment verification failed")

        # Only one concurrent verification can pop the order; the others get OrderNotFoundError
        order = self.orders.consume(data.order_id)
        # issue may rewrite the snapshot file, keep that disk write off the event loop
        record = await run_in_threadpool(self.redemptions.issue, order, result.gateway_payment_id or "")

        logfire.info(
            f"Payment verified for order {order.order_id}",
            extra={"payment_id": record.gateway_payment_id, "package_id": record.package_id},
        )
        return self.confirmation(record)

    def confirmation(self, record: RedemptionRecord) -> PurchaseConfirmation:
        return PurchaseConfirmation(
            record=record,
            download_url=bundle_url(self.delivery.api_base_url, record.token),
            item_urls=self.delivery.item_urls(record),
        )

    def resend_target(self, token: Optional[str]) -> PurchaseConfirmation:
        """Look up a redemption for re-sending its email. Raises NotFoundError for unknown tokens."""
        return self.confirmation(self.redemptions.lookup(token))
