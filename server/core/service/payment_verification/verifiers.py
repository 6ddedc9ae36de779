"""
Payment verification strategies.

`signature` recomputes the gateway's HMAC locally, `status_poll` asks the
gateway for the order's payments. Both return a VerificationResult; a
GatewayError raised from `verify` means the outcome is unknown and the order
must stay pending.
"""
import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import logfire

from server.core.service.payment_gateway.gateway_client import (
    PAYMENT_SUCCESS,
    PaymentGatewayClient,
    latest_payment,
)


class VerificationStatus(str, Enum):
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class VerificationInput:
    order_id: str
    payment_id: Optional[str] = None
    signature: Optional[str] = None


@dataclass(frozen=True)
class VerificationResult:
    status: VerificationStatus
    gateway_payment_id: Optional[str] = None
    reason: str = ""

    @property
    def verified(self) -> bool:
        return self.status is VerificationStatus.VERIFIED

    @classmethod
    def rejected(cls, reason: str) -> "VerificationResult":
        return cls(status=VerificationStatus.REJECTED, reason=reason)


class PaymentVerifier(ABC):
    """Decides whether the payment for a pending order went through."""

    name: str = ""

    @abstractmethod
    async def verify(self, data: VerificationInput) -> VerificationResult:
        pass


_verifier_registry: Dict[str, Callable[..., PaymentVerifier]] = {}


def register_verifier(name: str):
    def _decorator(cls):
        cls.name = name
        _verifier_registry[name.lower()] = cls
        return cls

    return _decorator


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA256 of `order_id|payment_id`, as Razorpay checkout signs it."""
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


@register_verifier("signature")
class SignatureVerifier(PaymentVerifier):
    """Offline check of the checkout signature. Never touches the network."""

    def __init__(self, secret: str, **_):
        self._secret = secret

    async def verify(self, data: VerificationInput) -> VerificationResult:
        if not self._secret:
            logfire.error("Signature verification is not configured, GATEWAY_KEY_SECRET is empty")
            return VerificationResult.rejected("Payment verification is not configured")
        if not data.payment_id or not data.signature:
            return VerificationResult.rejected("Missing payment id or signature")

        expected = compute_signature(self._secret, data.order_id, data.payment_id)
        if not hmac.compare_digest(expected.encode("utf-8"), data.signature.encode("utf-8")):
            logfire.warning(f"Signature mismatch for order {data.order_id}")
            return VerificationResult.rejected("Invalid signature")

        return VerificationResult(status=VerificationStatus.VERIFIED, gateway_payment_id=data.payment_id)


@register_verifier("status_poll")
class StatusPollVerifier(PaymentVerifier):
    """Trusts the gateway's view of the order's most recent payment."""

    def __init__(self, gateway: PaymentGatewayClient, **_):
        self._gateway = gateway

    async def verify(self, data: VerificationInput) -> VerificationResult:
        payments = await self._gateway.fetch_order_payments(data.order_id)
        payment = latest_payment(payments)
        if payment is None:
            return VerificationResult.rejected("No payment found for order")
        if payment.status != PAYMENT_SUCCESS:
            logfire.info(f"Payment for order {data.order_id} has status {payment.status}")
            return VerificationResult.rejected(f"Payment status is {payment.status}")
        return VerificationResult(status=VerificationStatus.VERIFIED, gateway_payment_id=payment.payment_id)


def build_verifier(name: str, *, secret: str = "", gateway: Optional[PaymentGatewayClient] = None) -> PaymentVerifier:
    factory = _verifier_registry.get((name or "").lower())
    if factory is None:
        raise ValueError(f"unsupported payment verifier: {name}")
    return factory(secret=secret, gateway=gateway)
