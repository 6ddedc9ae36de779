"""
Order ledger: pending orders keyed by gateway order id.

The ledger is the only owner of `PendingOrder` entries. `consume` is the
single atomic get-and-delete that turns a pending order into a redemption,
so a duplicate verification for the same order finds nothing to consume.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import logfire

from server.core.errors import OrderNotFoundError, ValidationError
from server.core.models.order_models import Customer, PendingOrder
from server.core.service.catalog.package_catalog import PackageCatalog
from server.core.service.ledger.storage import InMemoryStore, KeyValueStore
from server.core.service.payment_gateway.gateway_client import PaymentGatewayClient


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CreatedOrder:
    order_id: str
    amount: int
    currency: str
    gateway_session_ref: Optional[str]
    gateway_key_id: Optional[str]


def validate_customer(full_name: Optional[str], email: Optional[str], mobile: Optional[str]) -> Customer:
    values = [(value or "").strip() for value in (full_name, email, mobile)]
    if not all(values):
        raise ValidationError("All fields (fullName, email, mobile) are required")
    return Customer(full_name=values[0], email=values[1], mobile=values[2])


class OrderLedger:
    """Pending orders with a bounded lifetime."""

    def __init__(
        self,
        catalog: PackageCatalog,
        gateway: PaymentGatewayClient,
        currency: str,
        expiry: timedelta = timedelta(minutes=30),
        store: Optional[KeyValueStore[PendingOrder]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.catalog = catalog
        self.gateway = gateway
        self.currency = currency
        self.expiry = expiry
        self._store: KeyValueStore[PendingOrder] = store if store is not None else InMemoryStore()
        self._clock = clock

    async def create_order(self, customer: Customer, package_id: Optional[str]) -> CreatedOrder:
        """
        Validate the checkout, open an order with the gateway and remember it.

        Raises:
            ValidationError: blank customer fields or unknown package
            GatewayError: the gateway refused or could not be reached
        """
        customer = validate_customer(customer.full_name, customer.email, customer.mobile)
        package = self.catalog.get(package_id)

        local_id = None if self.gateway.assigns_order_id else f"order_{uuid.uuid4().hex}"
        # The gateway call happens before anything is stored, so a failure leaves no trace
        gateway_order = await self.gateway.create_order(
            order_id=local_id,
            amount=package.price,
            currency=self.currency,
            customer=customer,
            notes={"packageId": package.id},
        )

        order = PendingOrder(
            order_id=gateway_order.order_id,
            customer=customer,
            package_id=package.id,
            items=list(package.items),
            amount=package.price,
            currency=self.currency,
            created_at=self._clock(),
            gateway_session_ref=gateway_order.session_ref,
        )
        self._store.put(order.order_id, order)
        logfire.info(
            f"Order created: {order.order_id}",
            extra={"package_id": package.id, "amount": order.amount, "currency": order.currency},
        )
        return CreatedOrder(
            order_id=order.order_id,
            amount=order.amount,
            currency=order.currency,
            gateway_session_ref=order.gateway_session_ref,
            gateway_key_id=self.gateway.public_key,
        )

    def is_expired(self, order: PendingOrder, now: Optional[datetime] = None) -> bool:
        return (now or self._clock()) - order.created_at >= self.expiry

    def peek(self, order_id: Optional[str]) -> PendingOrder:
        """Return a live pending order without removing it."""
        order = self._store.get(order_id or "")
        if order is None or self.is_expired(order):
            raise OrderNotFoundError()
        return order

    def consume(self, order_id: Optional[str]) -> PendingOrder:
        """
        Atomically remove and return the order.

        A second call for the same id raises OrderNotFoundError. Expired
        entries are dropped and treated as missing.
        """
        order = self._store.pop(order_id or "")
        if order is None:
            raise OrderNotFoundError()
        if self.is_expired(order):
            logfire.info(f"Order {order.order_id} expired before it was consumed")
            raise OrderNotFoundError()
        return order

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Remove every order older than the expiry window. Returns the number removed."""
        now = now or self._clock()
        removed = 0
        for order_id, order in self._store.items():
            if self.is_expired(order, now) and self._store.delete(order_id):
                removed += 1
        if removed:
            logfire.info(f"Expired {removed} pending orders", extra={"remaining": len(self._store)})
        return removed

    def __contains__(self, order_id: str) -> bool:
        return self._store.get(order_id) is not None

    def __len__(self) -> int:
        return len(self._store)
