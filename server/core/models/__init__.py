"""Data models."""
from server.core.models.order_models import (
    ContentItem,
    Customer,
    PackageConfig,
    PendingOrder,
    RedemptionRecord,
)

__all__ = [
    "ContentItem",
    "Customer",
    "PackageConfig",
    "PendingOrder",
    "RedemptionRecord",
]
