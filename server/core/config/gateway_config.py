"""Payment gateway configuration checks."""
import logfire

from server.core.config.general_config import Settings


class GatewayConfig:
    """Endpoints and credential checks for the supported payment gateways."""

    SUPPORTED_GATEWAYS = {"razorpay", "cashfree"}
    SUPPORTED_VERIFIERS = {"signature", "status_poll"}

    RAZORPAY_BASE_URL: str = "https://api.razorpay.com/v1"
    CASHFREE_BASE_URL: str = "https://api.cashfree.com/pg"
    CASHFREE_SANDBOX_BASE_URL: str = "https://sandbox.cashfree.com/pg"
    CASHFREE_API_VERSION: str = "2023-08-01"

    @classmethod
    def base_url(cls, settings: Settings) -> str:
        if settings.PAYMENT_GATEWAY == "cashfree":
            if settings.GATEWAY_SANDBOX:
                return cls.CASHFREE_SANDBOX_BASE_URL
            return cls.CASHFREE_BASE_URL
        return cls.RAZORPAY_BASE_URL

    @classmethod
    def validate(cls, settings: Settings, strict: bool = False) -> None:
        """
        Validate that required gateway configuration is set.

        Args:
            settings: The application settings to check.
            strict: If True, raise exception on missing config. If False, only log warnings.
        """
        if settings.PAYMENT_GATEWAY not in cls.SUPPORTED_GATEWAYS:
            raise ValueError(f"Unsupported PAYMENT_GATEWAY: {settings.PAYMENT_GATEWAY}")
        if settings.PAYMENT_VERIFIER not in cls.SUPPORTED_VERIFIERS:
            raise ValueError(f"Unsupported PAYMENT_VERIFIER: {settings.PAYMENT_VERIFIER}")

        errors = []
        for name in ("GATEWAY_KEY_ID", "GATEWAY_KEY_SECRET"):
            if getattr(settings, name):
                continue
            msg = (
                f"Payment gateway credential {name} is not set. "
                f"Please set the environment variable {name}."
            )
            if strict:
                errors.append(msg)
            else:
                logfire.warning(f"Warning: {msg}")

        if not settings.ADMIN_SECRET_KEY:
            logfire.warning("ADMIN_SECRET_KEY is not set, admin endpoints will reject every request.")

        if strict and errors:
            raise ValueError(f"Missing required gateway configuration: {', '.join(errors)}")
