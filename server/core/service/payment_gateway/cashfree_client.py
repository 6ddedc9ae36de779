"""Cashfree PG orders client."""
from datetime import datetime
from typing import Dict, Optional

import logfire

from server.core.config.gateway_config import GatewayConfig
from server.core.errors import GatewayError
from server.core.models.order_models import Customer
from server.core.service.payment_gateway.gateway_client import (
    GatewayOrder,
    GatewayPayment,
    PaymentGatewayClient,
)


def to_major_units(amount: int) -> float:
    """Cashfree expects rupees, the rest of the service works in paise."""
    return round(amount / 100, 2)


class CashfreeClient(PaymentGatewayClient):
    """
    Cashfree lets the merchant choose the order id and hands back a
    `payment_session_id` the browser SDK uses to open checkout.
    """

    name = "cashfree"
    assigns_order_id = False

    def _headers(self) -> Dict[str, str]:
        return {
            "x-client-id": self.key_id,
            "x-client-secret": self.key_secret,
            "x-api-version": GatewayConfig.CASHFREE_API_VERSION,
            "Content-Type": "application/json",
        }

    async def create_order(self, order_id: Optional[str], amount: int, currency: str,
                           customer: Customer, notes: Dict[str, str]) -> GatewayOrder:
        if not order_id:
            raise ValueError("Cashfree orders need a merchant order id")
        payload = {
            "order_id": order_id,
            "order_amount": to_major_units(amount),
            "order_currency": currency,
            "customer_details": {
                "customer_id": f"cust_{order_id}",
                "customer_name": customer.full_name,
                "customer_email": customer.email,
                "customer_phone": customer.mobile,
            },
            "order_note": notes.get("packageId", ""),
        }
        data = await self._request("POST", "/orders", json=payload, headers=self._headers())
        session_id = data.get("payment_session_id")
        if not session_id:
            raise GatewayError("cashfree did not return a payment session")
        logfire.info(f"Cashfree order created: {order_id}", extra={"amount": amount})
        return GatewayOrder(order_id=data.get("order_id") or order_id, session_ref=session_id)

    async def fetch_order_payments(self, order_id: str) -> list[GatewayPayment]:
        data = await self._request("GET", f"/orders/{order_id}/payments", headers=self._headers())
        payments = []
        for item in data or []:
            payment_time = item.get("payment_time")
            try:
                created_at = datetime.fromisoformat(payment_time) if payment_time else None
            except ValueError:
                created_at = None
            payments.append(GatewayPayment(
                payment_id=str(item.get("cf_payment_id", "")),
                status=str(item.get("payment_status", "")).upper(),
                created_at=created_at,
            ))
        return payments
