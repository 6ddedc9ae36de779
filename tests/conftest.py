"""
Shared fixtures: settings pointing at a temp assets dir, a scripted payment
gateway, a notifier that records instead of mailing, and a TestClient built
from an injected application context.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from server.core.config.general_config import Settings
from server.core.context import AppContext, build_context
from server.core.errors import EmailDeliveryError, GatewayError
from server.core.models.order_models import Customer
from server.core.service.catalog.package_catalog import PackageCatalog
from server.core.service.email_service.purchase_notifier import ContactMessage, PurchaseNotifier
from server.core.service.payment_gateway.gateway_client import (
    GatewayOrder,
    GatewayPayment,
    PaymentGatewayClient,
)
from server.main import create_application

GATEWAY_SECRET = "test_gateway_secret"
ADMIN_KEY = "test-admin-key"

LUXURY_BYTES = b"%PDF-1.4 luxury reel bundle"
PREMIUM_BYTES = b"%PDF-1.4 premium digital bundle"


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeGateway(PaymentGatewayClient):
    """Hands out O1, O2, ... and answers payment lookups from `payments`."""

    name = "fake-gateway"

    def __init__(self, assigns_order_id: bool = True):
        super().__init__(base_url="https://gateway.test", key_id="rzp_test_key", key_secret=GATEWAY_SECRET)
        self.assigns_order_id = assigns_order_id
        self.created: list[dict] = []
        self.payments: Dict[str, list[GatewayPayment]] = {}
        self.payment_lookups = 0
        self.fail = False
        self._counter = 0

    @property
    def public_key(self) -> Optional[str]:
        return self.key_id

    async def create_order(self, order_id, amount, currency, customer, notes):
        if self.fail:
            raise GatewayError("Could not reach fake-gateway")
        self._counter += 1
        gateway_order_id = order_id or f"O{self._counter}"
        self.created.append({"order_id": gateway_order_id, "amount": amount, "currency": currency})
        return GatewayOrder(order_id=gateway_order_id, session_ref=f"session_{gateway_order_id}")

    async def fetch_order_payments(self, order_id):
        self.payment_lookups += 1
        if self.fail:
            raise GatewayError("Could not reach fake-gateway")
        return list(self.payments.get(order_id, []))


class RecordingNotifier(PurchaseNotifier):
    def __init__(self, catalog: PackageCatalog, assets_dir):
        super().__init__(None, catalog, assets_dir, admin_email="admin@example.com")
        self.purchase_emails: list[tuple] = []
        self.contact_messages: list[ContactMessage] = []
        self.fail_contact = False

    async def send_purchase_email(self, record, download_url) -> bool:
        self.purchase_emails.append((record, download_url))
        return True

    async def send_contact_emails(self, message: ContactMessage) -> None:
        if self.fail_contact:
            raise EmailDeliveryError("Failed to send message", status_code=500)
        self.contact_messages.append(message)


@pytest.fixture
def assets_dir(tmp_path):
    directory = tmp_path / "assets"
    directory.mkdir()
    (directory / "Luxury_Reel_Bundle.pdf").write_bytes(LUXURY_BYTES)
    (directory / "Premium_Digital_Bundle_2025.pdf").write_bytes(PREMIUM_BYTES)
    return directory


@pytest.fixture
def settings(assets_dir) -> Settings:
    return Settings(
        _env_file=None,
        BASE_URL="http://testserver",
        PAYMENT_GATEWAY="razorpay",
        PAYMENT_VERIFIER="signature",
        GATEWAY_KEY_ID="rzp_test_key",
        GATEWAY_KEY_SECRET=GATEWAY_SECRET,
        ADMIN_SECRET_KEY=ADMIN_KEY,
        ASSETS_DIR=assets_dir,
        REDEMPTION_STORE_PATH="",
        MAIL_SERVER="",
        MAIL_FROM="",
    )


@pytest.fixture
def catalog() -> PackageCatalog:
    return PackageCatalog()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier(catalog, assets_dir) -> RecordingNotifier:
    return RecordingNotifier(catalog, assets_dir)


@pytest.fixture
def customer() -> Customer:
    return Customer(full_name="A", email="a@x.com", mobile="111")


@pytest.fixture
def context(settings, catalog, gateway, notifier) -> AppContext:
    return build_context(settings, catalog=catalog, gateway=gateway, notifier=notifier)


@pytest.fixture
def client(settings, context) -> TestClient:
    """TestClient without the lifespan, so no sweeper task or logfire setup runs."""
    return TestClient(create_application(settings, context))
