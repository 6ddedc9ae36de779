"""Payment gateway clients."""
from server.core.config.general_config import Settings
from server.core.config.gateway_config import GatewayConfig
from server.core.service.payment_gateway.cashfree_client import CashfreeClient
from server.core.service.payment_gateway.gateway_client import (
    GatewayOrder,
    GatewayPayment,
    PaymentGatewayClient,
)
from server.core.service.payment_gateway.razorpay_client import RazorpayClient


def build_gateway_client(settings: Settings) -> PaymentGatewayClient:
    """Pick the gateway client named by PAYMENT_GATEWAY."""
    client_class = CashfreeClient if settings.PAYMENT_GATEWAY == "cashfree" else RazorpayClient
    return client_class(
        base_url=GatewayConfig.base_url(settings),
        key_id=settings.GATEWAY_KEY_ID,
        key_secret=settings.GATEWAY_KEY_SECRET,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
    )


__all__ = [
    "CashfreeClient",
    "GatewayOrder",
    "GatewayPayment",
    "PaymentGatewayClient",
    "RazorpayClient",
    "build_gateway_client",
]
