"""Content delivery."""
from server.core.service.delivery.content_delivery import (
    BundlePage,
    ContentDelivery,
    ItemLink,
    ResolvedFile,
    bundle_url,
    item_url,
)

__all__ = ["BundlePage", "ContentDelivery", "ItemLink", "ResolvedFile", "bundle_url", "item_url"]
