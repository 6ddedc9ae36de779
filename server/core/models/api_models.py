"""Request and response bodies of the HTTP API."""
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from server.core.models.order_models import CamelModel, Customer


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class CreateOrderRequest(CamelModel):
    """Checkout form. Fields are checked by the order ledger, not here."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    package_id: Optional[str] = None


class CreateOrderResponse(CamelModel):
    success: bool = True
    order_id: str
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str
    gateway_session_ref: Optional[str] = None
    gateway_key_id: Optional[str] = None


class VerifyPaymentRequest(BaseModel):
    """
    Gateway callback fields. Razorpay checkout posts the `razorpay_*` names,
    the Cashfree flow only needs the order id.
    """
    order_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_order_id", "orderId", "order_id"))
    payment_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_payment_id", "paymentId", "payment_id"))
    signature: Optional[str] = Field(
        None, validation_alias=AliasChoices("razorpay_signature", "signature"))


class VerifyPaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment verified successfully"
    download_url: str
    download_token: str
    per_item_download_urls: list[str]
    customer: Customer


class ResendEmailRequest(BaseModel):
    token: Optional[str] = Field(None, validation_alias=AliasChoices("token", "downloadToken"))


class ContactRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    issue: Optional[str] = None


class PackageSummary(CamelModel):
    id: str
    price: int
    currency: str
    description: str
    items: list[str]


class PackageListResponse(CamelModel):
    success: bool = True
    packages: list[PackageSummary]


class DownloadLink(CamelModel):
    index: int
    title: str
    description: str
    url: str


class DownloadPageResponse(CamelModel):
    success: bool = True
    customer: Customer
    order_id: str
    package_id: str
    items: list[DownloadLink]
    downloaded: bool
    downloaded_at: Optional[datetime] = None


class PackageStats(CamelModel):
    count: int = 0
    revenue: int = 0


class DailyBucket(CamelModel):
    date: str
    count: int = 0
    revenue: int = 0


class RecentPayment(CamelModel):
    email: str
    full_name: str
    package_id: str
    amount: int
    completed_at: datetime
    downloaded: bool
    downloaded_at: Optional[datetime] = None


class StatsResponse(CamelModel):
    success: bool = True
    total_payments: int
    total_downloads: int
    total_revenue: int
    packages: dict[str, PackageStats]
    daily_payments: list[DailyBucket]
    recent_payments: list[RecentPayment]


class PaymentCountResponse(CamelModel):
    success: bool = True
    total_payments: int
    total_downloads: int
    total_revenue: int
