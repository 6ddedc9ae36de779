"""
Payment gateway client contract.

Clients talk to the provider over `httpx.AsyncClient` and translate every
transport failure or non-2xx answer into `GatewayError`, so callers only have
to distinguish "could not determine" from a real answer.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import logfire

from server.core.errors import GatewayError
from server.core.models.order_models import Customer

PAYMENT_SUCCESS = "SUCCESS"


@dataclass(frozen=True)
class GatewayOrder:
    order_id: str
    session_ref: Optional[str] = None


@dataclass(frozen=True)
class GatewayPayment:
    """A payment attempt for an order, with the status normalized to the gateway's SUCCESS vocabulary."""
    payment_id: str
    status: str
    created_at: Optional[datetime] = None


class PaymentGatewayClient(ABC):
    """Interface the order ledger and the status-poll verifier need from a gateway."""

    name: str = "gateway"
    # Whether the caller must supply the order id (Cashfree) or the gateway assigns it (Razorpay)
    assigns_order_id: bool = True

    def __init__(self, base_url: str, key_id: str, key_secret: str, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.key_id = key_id
        self.key_secret = key_secret
        self.timeout = timeout
        self._transport = transport

    @property
    def public_key(self) -> Optional[str]:
        """Key the browser checkout needs, if any."""
        return None

    @abstractmethod
    async def create_order(self, order_id: Optional[str], amount: int, currency: str,
                           customer: Customer, notes: Dict[str, str]) -> GatewayOrder:
        pass

    @abstractmethod
    async def fetch_order_payments(self, order_id: str) -> list[GatewayPayment]:
        pass

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logfire.error(f"{self.name} request {method} {path} failed: {e}")
            raise GatewayError(f"Could not reach {self.name}") from e

        if response.status_code >= 400:
            logfire.error(
                f"{self.name} responded with {response.status_code}",
                extra={"path": path, "body": response.text[:500]},
            )
            raise GatewayError(f"{self.name} request failed with status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"{self.name} returned an invalid response") from e


def latest_payment(payments: list[GatewayPayment]) -> Optional[GatewayPayment]:
    """Most recent payment attempt, payments without a timestamp sort first."""
    if not payments:
        return None
    return max(
        enumerate(payments),
        key=lambda pair: (pair[1].created_at is not None, pair[1].created_at or datetime.min, pair[0]),
    )[1]
