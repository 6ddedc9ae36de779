"""Token-gated access to purchased files."""
from dataclasses import dataclass
from pathlib import Path

import logfire

from server.core.errors import NotFoundError
from server.core.models.order_models import ContentItem, RedemptionRecord
from server.core.service.catalog.package_catalog import PackageCatalog
from server.core.service.ledger.redemption_ledger import RedemptionLedger, token_hint


@dataclass(frozen=True)
class ResolvedFile:
    path: Path
    download_name: str
    media_type: str = "application/pdf"


@dataclass(frozen=True)
class ItemLink:
    index: int
    item: ContentItem
    url: str


@dataclass(frozen=True)
class BundlePage:
    record: RedemptionRecord
    links: list[ItemLink]


def bundle_url(api_base_url: str, token: str) -> str:
    return f"{api_base_url.rstrip('/')}/download-pdf/{token}"


def item_url(api_base_url: str, token: str, index: int) -> str:
    return f"{api_base_url.rstrip('/')}/download-file/{token}/{index}"


class ContentDelivery:
    """Resolves a download token and a 1-based item index to a file on disk."""

    def __init__(self, ledger: RedemptionLedger, catalog: PackageCatalog, assets_dir: Path, api_base_url: str):
        self.ledger = ledger
        self.catalog = catalog
        self.assets_dir = Path(assets_dir)
        self.api_base_url = api_base_url

    def item_urls(self, record: RedemptionRecord) -> list[str]:
        return [item_url(self.api_base_url, record.token, i) for i in range(1, len(record.items) + 1)]

    def resolve_item(self, token: str, item_index: int) -> ResolvedFile:
        """
        Find the file behind `item_index` of the token's purchase and mark the
        purchase downloaded.

        Raises:
            NotFoundError: unknown token, index out of range, unknown item or file missing on disk
        """
        record = self.ledger.lookup(token)
        if not 1 <= item_index <= len(record.items):
            raise NotFoundError("File not found")

        item = self.catalog.content_item(record.items[item_index - 1])
        if item is None:
            logfire.error(f"Purchased item {record.items[item_index - 1]!r} is not in the catalog",
                          extra={"order_id": record.order_id})
            raise NotFoundError("File not found")

        path = self.assets_dir / item.id
        if not path.is_file():
            logfire.error(f"Content file missing on disk: {path}")
            raise NotFoundError("PDF file not found")

        self.ledger.mark_downloaded(token)
        logfire.info(f"{item.download_name} downloaded",
                     extra={"token": token_hint(token), "email": record.customer.email})
        return ResolvedFile(path=path, download_name=item.download_name)

    def resolve_bundle_page(self, token: str) -> BundlePage:
        """Summary of the purchase with one link per item. Does not mark anything downloaded."""
        record = self.ledger.lookup(token)
        links = []
        for index, item_id in enumerate(record.items, start=1):
            item = self.catalog.content_item(item_id) or ContentItem(id=item_id, title=Path(item_id).stem)
            links.append(ItemLink(index=index, item=item, url=item_url(self.api_base_url, token, index)))
        return BundlePage(record=record, links=links)
