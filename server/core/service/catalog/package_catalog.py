"""
Static package catalog.

Package prices are integer minor currency units (paise for INR). Content item
ids are file names inside the configured assets directory.
"""
from pathlib import Path
from typing import Iterable, Mapping

import logfire

from server.core.errors import ValidationError
from server.core.models.order_models import ContentItem, PackageConfig

CONTENT_ITEMS: dict[str, ContentItem] = {
    item.id: item
    for item in (
        ContentItem(
            id="Luxury_Reel_Bundle.pdf",
            title="Luxury Reel Bundle",
            description="Premium collection of luxury lifestyle reel ideas",
        ),
        ContentItem(
            id="Premium_Digital_Bundle_2025.pdf",
            title="Premium Digital Bundle 2025",
            description="Complete digital content creation bundle for 2025",
        ),
    )
}

PACKAGES: dict[str, PackageConfig] = {
    package.id: package
    for package in (
        PackageConfig(
            id="Starter Viral Pack",
            price=9900,
            items=("Luxury_Reel_Bundle.pdf",),
            description="150+ trending, copyright-free reel ideas",
        ),
        PackageConfig(
            id="Premium Creator Pack",
            price=14900,
            items=("Premium_Digital_Bundle_2025.pdf",),
            description="Complete digital content creation bundle for 2025",
        ),
        PackageConfig(
            id="Complete Creator Bundle",
            price=19900,
            items=("Luxury_Reel_Bundle.pdf", "Premium_Digital_Bundle_2025.pdf"),
            description="Both guides with lifetime access",
        ),
    )
}


class PackageCatalog:
    """Read-only lookup over packages and the content items they reference."""

    def __init__(
        self,
        packages: Mapping[str, PackageConfig] | None = None,
        content_items: Mapping[str, ContentItem] | None = None,
    ):
        self._packages = dict(PACKAGES if packages is None else packages)
        self._content_items = dict(CONTENT_ITEMS if content_items is None else content_items)
        for package in self._packages.values():
            unknown = [item for item in package.items if item not in self._content_items]
            if unknown:
                raise ValueError(f"Package {package.id!r} references unknown items: {unknown}")

    def get(self, package_id: str | None) -> PackageConfig:
        package = self._packages.get(package_id or "")
        if package is None:
            raise ValidationError(f"Unknown package: {package_id}")
        return package

    def list_packages(self) -> list[PackageConfig]:
        return list(self._packages.values())

    def content_item(self, item_id: str) -> ContentItem | None:
        return self._content_items.get(item_id)

    def content_items(self, item_ids: Iterable[str]) -> list[ContentItem]:
        return [self._content_items[item_id] for item_id in item_ids if item_id in self._content_items]

    def verify_assets(self, assets_dir: Path) -> list[str]:
        """Log and return referenced items that are missing on disk."""
        referenced = {item for package in self._packages.values() for item in package.items}
        missing = sorted(item for item in referenced if not (assets_dir / item).is_file())
        for item in missing:
            logfire.warning(f"Content file missing from assets directory: {item}",
                            extra={"assets_dir": str(assets_dir)})
        return missing
