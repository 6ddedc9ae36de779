"""Application context built once at startup and handed to every endpoint."""
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

from fastapi import Request

from server.core.config.gateway_config import GatewayConfig
from server.core.config.general_config import Settings
from server.core.service.catalog.package_catalog import PackageCatalog
from server.core.service.delivery.content_delivery import ContentDelivery
from server.core.service.email_service.email_send_service import EmailSendService
from server.core.service.email_service.purchase_notifier import PurchaseNotifier
from server.core.service.ledger.order_ledger import OrderLedger
from server.core.service.ledger.redemption_ledger import RedemptionLedger
from server.core.service.ledger.redemption_snapshot import RedemptionSnapshot
from server.core.service.payment_gateway import PaymentGatewayClient, build_gateway_client
from server.core.service.payment_verification.verifiers import PaymentVerifier, build_verifier
from server.core.service.purchase_service import PurchaseService


@dataclass
class AppContext:
    settings: Settings
    catalog: PackageCatalog
    gateway: PaymentGatewayClient
    verifier: PaymentVerifier
    orders: OrderLedger
    redemptions: RedemptionLedger
    delivery: ContentDelivery
    notifier: PurchaseNotifier
    purchases: PurchaseService


def build_context(
    settings: Settings,
    *,
    catalog: Optional[PackageCatalog] = None,
    gateway: Optional[PaymentGatewayClient] = None,
    verifier: Optional[PaymentVerifier] = None,
    redemptions: Optional[RedemptionLedger] = None,
    notifier: Optional[PurchaseNotifier] = None,
) -> AppContext:
    """Wire the services from settings. Keyword arguments replace individual collaborators."""
    GatewayConfig.validate(settings, strict=False)

    assets_dir = Path(settings.ASSETS_DIR)
    catalog = catalog or PackageCatalog()
    catalog.verify_assets(assets_dir)

    gateway = gateway or build_gateway_client(settings)
    verifier = verifier or build_verifier(
        settings.PAYMENT_VERIFIER, secret=settings.GATEWAY_KEY_SECRET, gateway=gateway)

    orders = OrderLedger(
        catalog=catalog,
        gateway=gateway,
        currency=settings.CURRENCY,
        expiry=timedelta(minutes=settings.ORDER_EXPIRY_MINUTES),
    )
    if redemptions is None:
        snapshot = RedemptionSnapshot(Path(settings.REDEMPTION_STORE_PATH)) if settings.REDEMPTION_STORE_PATH else None
        redemptions = RedemptionLedger(snapshot=snapshot)

    delivery = ContentDelivery(redemptions, catalog, assets_dir, settings.api_base_url)
    if notifier is None:
        mailer = EmailSendService.from_settings(settings) if settings.mail_configured else None
        notifier = PurchaseNotifier(mailer, catalog, assets_dir, settings.ADMIN_EMAIL, settings.SUPPORT_EMAIL)

    purchases = PurchaseService(orders, redemptions, verifier, delivery)
    return AppContext(
        settings=settings,
        catalog=catalog,
        gateway=gateway,
        verifier=verifier,
        orders=orders,
        redemptions=redemptions,
        delivery=delivery,
        notifier=notifier,
        purchases=purchases,
    )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context stored on the application."""
    return request.app.state.context
