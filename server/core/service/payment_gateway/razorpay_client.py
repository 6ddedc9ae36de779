"""Razorpay Orders API client."""
from datetime import datetime, timezone
from typing import Dict, Optional

import logfire

from server.core.errors import GatewayError
from server.core.models.order_models import Customer
from server.core.service.payment_gateway.gateway_client import (
    PAYMENT_SUCCESS,
    GatewayOrder,
    GatewayPayment,
    PaymentGatewayClient,
)


class RazorpayClient(PaymentGatewayClient):
    """Creates orders in paise and reads payment attempts for an order."""

    name = "razorpay"
    assigns_order_id = True

    @property
    def public_key(self) -> Optional[str]:
        return self.key_id

    async def create_order(self, order_id: Optional[str], amount: int, currency: str,
                           customer: Customer, notes: Dict[str, str]) -> GatewayOrder:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": f"receipt_{int(datetime.now(timezone.utc).timestamp() * 1000)}",
            "notes": {
                "fullName": customer.full_name,
                "email": customer.email,
                "mobile": customer.mobile,
                **notes,
            },
        }
        data = await self._request("POST", "/orders", json=payload, auth=(self.key_id, self.key_secret))
        gateway_order_id = data.get("id")
        if not gateway_order_id:
            raise GatewayError("razorpay did not return an order id")
        logfire.info(f"Razorpay order created: {gateway_order_id}", extra={"amount": amount})
        return GatewayOrder(order_id=gateway_order_id, session_ref=None)

    async def fetch_order_payments(self, order_id: str) -> list[GatewayPayment]:
        data = await self._request("GET", f"/orders/{order_id}/payments", auth=(self.key_id, self.key_secret))
        payments = []
        for item in data.get("items") or []:
            status = str(item.get("status", "")).lower()
            created = item.get("created_at")
            payments.append(GatewayPayment(
                payment_id=str(item.get("id", "")),
                status=PAYMENT_SUCCESS if status == "captured" else status.upper(),
                created_at=datetime.fromtimestamp(created, tz=timezone.utc) if created else None,
            ))
        return payments
