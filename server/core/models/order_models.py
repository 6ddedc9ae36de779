"""Pydantic models for the catalog, pending orders and redemption records."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes field names as camelCase while accepting snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Customer(CamelModel):
    """Contact details collected at checkout."""
    full_name: str
    email: str
    mobile: str


class ContentItem(CamelModel):
    """A downloadable file. The id is the file name under the assets directory."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""

    @property
    def download_name(self) -> str:
        return f"{self.title}.pdf"


class PackageConfig(CamelModel):
    """A named, priced bundle of content items. Prices are in minor units."""
    model_config = ConfigDict(frozen=True)

    id: str
    price: int = Field(..., gt=0)
    items: tuple[str, ...] = Field(..., min_length=1)
    description: str = ""


class PendingOrder(CamelModel):
    """An order waiting for payment confirmation."""
    order_id: str
    customer: Customer
    package_id: str
    items: list[str]
    amount: int
    currency: str
    created_at: datetime
    gateway_session_ref: Optional[str] = None


class RedemptionRecord(CamelModel):
    """A confirmed purchase, addressed by its download token."""
    token: str
    customer: Customer
    package_id: str
    items: list[str]
    amount: int
    currency: str
    gateway_payment_id: str
    order_id: str
    completed_at: datetime
    downloaded: bool = False
    downloaded_at: Optional[datetime] = None
