import asyncio
import threading

import pytest

from server.core.errors import GatewayError, OrderNotFoundError, RejectedPaymentError, ValidationError
from server.core.service.ledger.redemption_ledger import RedemptionLedger
from server.core.service.payment_gateway.gateway_client import GatewayPayment
from server.core.service.payment_verification.verifiers import (
    StatusPollVerifier,
    VerificationInput,
    compute_signature,
)
from server.core.service.purchase_service import PurchaseService
from tests.conftest import GATEWAY_SECRET


def signed(order_id: str, payment_id: str = "P1") -> VerificationInput:
    return VerificationInput(
        order_id=order_id,
        payment_id=payment_id,
        signature=compute_signature(GATEWAY_SECRET, order_id, payment_id),
    )


@pytest.fixture
def purchases(context) -> PurchaseService:
    return context.purchases


@pytest.mark.asyncio
async def test_create_then_verify_issues_token(purchases, context):
    created = await purchases.create_order("A", "a@x.com", "111", "Starter Viral Pack")
    assert created.order_id == "O1"
    assert created.amount == 9900

    confirmation = await purchases.verify_payment(signed("O1"))

    record = confirmation.record
    assert record.items == ["Luxury_Reel_Bundle.pdf"]
    assert record.gateway_payment_id == "P1"
    assert confirmation.download_url == f"http://testserver/api/download-pdf/{record.token}"
    assert confirmation.item_urls == [f"http://testserver/api/download-file/{record.token}/1"]
    assert "O1" not in context.orders
    assert len(context.redemptions) == 1


@pytest.mark.asyncio
async def test_create_order_requires_package_id(purchases):
    with pytest.raises(ValidationError, match="packageId is required"):
        await purchases.create_order("A", "a@x.com", "111", "  ")


@pytest.mark.asyncio
async def test_verify_without_order_id_is_rejected(purchases):
    with pytest.raises(ValidationError):
        await purchases.verify_payment(VerificationInput(order_id=""))


@pytest.mark.asyncio
async def test_verify_unknown_order_skips_verifier(context):
    context.purchases.verifier = StatusPollVerifier(gateway=context.gateway)

    with pytest.raises(OrderNotFoundError):
        await context.purchases.verify_payment(VerificationInput(order_id="nope"))

    assert context.gateway.payment_lookups == 0


@pytest.mark.asyncio
async def test_bad_signature_leaves_order_pending_for_retry(purchases, context):
    await purchases.create_order("A", "a@x.com", "111", "Starter Viral Pack")

    with pytest.raises(RejectedPaymentError):
        await purchases.verify_payment(VerificationInput(order_id="O1", payment_id="P1", signature="deadbeef"))
    assert "O1" in context.orders

    confirmation = await purchases.verify_payment(signed("O1"))
    assert confirmation.record.order_id == "O1"


@pytest.mark.asyncio
async def test_gateway_error_during_status_poll_leaves_order_pending(context):
    context.purchases.verifier = StatusPollVerifier(gateway=context.gateway)
    await context.purchases.create_order("A", "a@x.com", "111", "Premium Creator Pack")
    context.gateway.fail = True

    with pytest.raises(GatewayError):
        await context.purchases.verify_payment(VerificationInput(order_id="O1"))

    assert "O1" in context.orders
    assert len(context.redemptions) == 0


@pytest.mark.asyncio
async def test_status_poll_success_redeems_order(context):
    context.purchases.verifier = StatusPollVerifier(gateway=context.gateway)
    await context.purchases.create_order("A", "a@x.com", "111", "Complete Creator Bundle")
    context.gateway.payments["O1"] = [GatewayPayment(payment_id="cf_9", status="SUCCESS")]

    confirmation = await context.purchases.verify_payment(VerificationInput(order_id="O1"))

    assert confirmation.record.gateway_payment_id == "cf_9"
    assert len(confirmation.item_urls) == 2


@pytest.mark.asyncio
async def test_second_verification_of_same_order_fails(purchases):
    await purchases.create_order("A", "a@x.com", "111", "Starter Viral Pack")
    await purchases.verify_payment(signed("O1"))

    with pytest.raises(OrderNotFoundError):
        await purchases.verify_payment(signed("O1"))


@pytest.mark.asyncio
async def test_concurrent_verifications_issue_exactly_one_token(purchases, context):
    await purchases.create_order("A", "a@x.com", "111", "Starter Viral Pack")

    results = await asyncio.gather(
        *(purchases.verify_payment(signed("O1")) for _ in range(5)),
        return_exceptions=True,
    )

    confirmations = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(confirmations) == 1
    assert all(isinstance(f, OrderNotFoundError) for f in failures)
    assert len(context.redemptions) == 1


@pytest.mark.asyncio
async def test_resend_target_rebuilds_urls(purchases):
    await purchases.create_order("A", "a@x.com", "111", "Complete Creator Bundle")
    token = (await purchases.verify_payment(signed("O1"))).record.token

    target = purchases.resend_target(token)

    assert target.download_url.endswith(f"/download-pdf/{token}")
    assert target.item_urls[-1].endswith(f"/download-file/{token}/2")


class ThreadRecordingLedger(RedemptionLedger):
    def __init__(self):
        super().__init__()
        self.issue_threads: list[int] = []

    def issue(self, order, gateway_payment_id):
        self.issue_threads.append(threading.get_ident())
        return super().issue(order, gateway_payment_id)


@pytest.mark.asyncio
async def test_token_issue_runs_off_the_event_loop(purchases):
    ledger = ThreadRecordingLedger()
    purchases.redemptions = ledger
    await purchases.create_order("A", "a@x.com", "111", "Starter Viral Pack")

    await purchases.verify_payment(signed("O1"))

    assert len(ledger.issue_threads) == 1
    assert ledger.issue_threads[0] != threading.get_ident()
