"""Order and redemption ledgers."""
from server.core.service.ledger.order_ledger import CreatedOrder, OrderLedger
from server.core.service.ledger.redemption_ledger import RedemptionLedger
from server.core.service.ledger.redemption_snapshot import RedemptionSnapshot
from server.core.service.ledger.storage import InMemoryStore, KeyValueStore

__all__ = [
    "CreatedOrder",
    "InMemoryStore",
    "KeyValueStore",
    "OrderLedger",
    "RedemptionLedger",
    "RedemptionSnapshot",
]
