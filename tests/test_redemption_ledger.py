import json
import re

import pytest

from server.core.errors import NotFoundError
from server.core.models.order_models import PendingOrder
from server.core.service.ledger.redemption_ledger import RedemptionLedger, new_download_token
from server.core.service.ledger.redemption_snapshot import RedemptionSnapshot
from tests.conftest import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pending_order(customer, clock) -> PendingOrder:
    return PendingOrder(
        order_id="O1",
        customer=customer,
        package_id="Starter Viral Pack",
        items=["Luxury_Reel_Bundle.pdf"],
        amount=9900,
        currency="INR",
        created_at=clock(),
    )


def test_tokens_are_256_bit_hex():
    assert re.fullmatch(r"[0-9a-f]{64}", new_download_token())


def test_ten_thousand_tokens_are_distinct():
    tokens = {new_download_token() for _ in range(10_000)}
    assert len(tokens) == 10_000


def test_issue_copies_order_into_record(pending_order, clock):
    ledger = RedemptionLedger(clock=clock)

    record = ledger.issue(pending_order, "P1")

    assert record.items == ["Luxury_Reel_Bundle.pdf"]
    assert record.customer == pending_order.customer
    assert record.amount == 9900
    assert record.order_id == "O1"
    assert record.gateway_payment_id == "P1"
    assert record.completed_at == clock()
    assert record.downloaded is False
    assert record.downloaded_at is None

    pending_order.items.append("Premium_Digital_Bundle_2025.pdf")
    assert ledger.lookup(record.token).items == ["Luxury_Reel_Bundle.pdf"]


def test_lookup_unknown_token_raises_not_found():
    with pytest.raises(NotFoundError):
        RedemptionLedger().lookup("0" * 64)


def test_mark_downloaded_is_idempotent(pending_order, clock):
    ledger = RedemptionLedger(clock=clock)
    token = ledger.issue(pending_order, "P1").token

    clock.advance(minutes=5)
    first = ledger.mark_downloaded(token)
    clock.advance(minutes=5)
    second = ledger.mark_downloaded(token)

    assert first.downloaded and second.downloaded
    assert first.downloaded_at == second.downloaded_at
    assert ledger.lookup(token).downloaded_at == first.downloaded_at


def test_mark_downloaded_unknown_token_raises_not_found():
    with pytest.raises(NotFoundError):
        RedemptionLedger().mark_downloaded("missing")


def test_returned_records_do_not_alias_ledger_state(pending_order):
    ledger = RedemptionLedger()
    record = ledger.issue(pending_order, "P1")

    record.downloaded = True

    assert ledger.lookup(record.token).downloaded is False


def test_snapshot_survives_restart(tmp_path, pending_order, clock):
    path = tmp_path / "state" / "redemptions.json"
    ledger = RedemptionLedger(snapshot=RedemptionSnapshot(path), clock=clock)
    token = ledger.issue(pending_order, "P1").token
    ledger.mark_downloaded(token)

    restored = RedemptionLedger(snapshot=RedemptionSnapshot(path))

    record = restored.lookup(token)
    assert record.downloaded is True
    assert record.downloaded_at == clock()
    assert record.customer.full_name == "A"
    assert len(restored) == 1


def test_snapshot_file_layout(tmp_path, pending_order):
    path = tmp_path / "redemptions.json"
    ledger = RedemptionLedger(snapshot=RedemptionSnapshot(path))
    token = ledger.issue(pending_order, "P1").token

    raw = json.loads(path.read_text(encoding="utf-8"))

    assert "lastUpdated" in raw
    assert raw["records"][0][0] == token
    assert raw["records"][0][1]["packageId"] == "Starter Viral Pack"
