"""
Redemption ledger: confirmed purchases keyed by download token.

A token is a 256-bit random bearer credential. Records are never deleted and
`downloaded` only ever moves from False to True.
"""
import secrets
import threading
from datetime import datetime
from typing import Callable, Optional

import logfire

from server.core.errors import NotFoundError
from server.core.models.order_models import PendingOrder, RedemptionRecord
from server.core.service.ledger.order_ledger import utc_now
from server.core.service.ledger.redemption_snapshot import RedemptionSnapshot
from server.core.service.ledger.storage import InMemoryStore, KeyValueStore

TOKEN_BYTES = 32


def new_download_token() -> str:
    """64 hex characters from the OS CSPRNG."""
    return secrets.token_hex(TOKEN_BYTES)


def token_hint(token: str) -> str:
    """Prefix safe to put in logs."""
    return f"{token[:8]}..."


class RedemptionLedger:
    """
    Issues tokens and tracks download state. Mutations are serialized by one
    lock and rewrite the snapshot synchronously, so async callers run them in
    a worker thread.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore[RedemptionRecord]] = None,
        snapshot: Optional[RedemptionSnapshot] = None,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[], str] = new_download_token,
    ):
        self._snapshot = snapshot
        if store is None:
            store = InMemoryStore(snapshot.load() if snapshot else None)
        self._store: KeyValueStore[RedemptionRecord] = store
        self._clock = clock
        self._token_factory = token_factory
        self._lock = threading.Lock()

    def issue(self, order: PendingOrder, gateway_payment_id: str) -> RedemptionRecord:
        """Create the redemption record for a consumed order."""
        with self._lock:
            record = RedemptionRecord(
                token=self._token_factory(),
                customer=order.customer.model_copy(),
                package_id=order.package_id,
                items=list(order.items),
                amount=order.amount,
                currency=order.currency,
                gateway_payment_id=gateway_payment_id,
                order_id=order.order_id,
                completed_at=self._clock(),
            )
            self._store.put(record.token, record)
            self._persist()
        logfire.info(
            f"Download token issued for order {order.order_id}",
            extra={"token": token_hint(record.token), "package_id": record.package_id},
        )
        return record.model_copy(deep=True)

    def lookup(self, token: Optional[str]) -> RedemptionRecord:
        record = self._store.get(token or "")
        if record is None:
            raise NotFoundError("Invalid or expired download link")
        return record.model_copy(deep=True)

    def mark_downloaded(self, token: Optional[str]) -> RedemptionRecord:
        """Flag the record as downloaded. Repeat calls keep the first timestamp."""
        with self._lock:
            record = self._store.get(token or "")
            if record is None:
                raise NotFoundError("Invalid or expired download link")
            if not record.downloaded:
                record = record.model_copy(update={"downloaded": True, "downloaded_at": self._clock()})
                self._store.put(record.token, record)
                self._persist()
                logfire.info(f"First download for order {record.order_id}",
                             extra={"token": token_hint(record.token)})
            return record.model_copy(deep=True)

    def records(self) -> list[RedemptionRecord]:
        return [record.model_copy(deep=True) for record in self._store.values()]

    def __len__(self) -> int:
        return len(self._store)

    def _persist(self) -> None:
        if self._snapshot is None:
            return
        try:
            self._snapshot.save(dict(self._store.items()))
        except OSError:
            # The in-memory ledger stays authoritative until the next successful write
            logfire.exception(f"Failed to write redemption snapshot to {self._snapshot.path}")
