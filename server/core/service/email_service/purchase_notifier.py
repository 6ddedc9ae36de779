"""
Outbound mail for purchases and the contact form.

Purchase mails are best-effort: they run as background tasks after the
verify-payment response went out, and a failure is logged, never raised.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import logfire

from server.core.errors import EmailDeliveryError
from server.core.models.order_models import RedemptionRecord
from server.core.service.catalog.package_catalog import PackageCatalog
from server.core.service.email_service.email_send_service import EmailSendService


@dataclass(frozen=True)
class ContactMessage:
    full_name: str
    email: str
    issue: str


def format_amount(amount: int, currency: str) -> str:
    return f"{currency} {amount / 100:,.2f}"


class PurchaseNotifier:
    """Renders and sends the mails; works as a no-op when no mailer is configured."""

    def __init__(
        self,
        mailer: Optional[EmailSendService],
        catalog: PackageCatalog,
        assets_dir: Path,
        admin_email: str = "",
        support_email: str = "",
    ):
        self.mailer = mailer
        self.catalog = catalog
        self.assets_dir = Path(assets_dir)
        self.admin_email = admin_email
        self.support_email = support_email

    async def send_purchase_email(self, record: RedemptionRecord, download_url: str) -> bool:
        """Mail the purchased files and the download link. Returns False on failure."""
        try:
            await self._send_purchase_email(record, download_url)
        except Exception as e:
            logfire.exception(
                f"Failed to send purchase email for order {record.order_id}: {e}",
                extra={"email": record.customer.email},
            )
            return False
        return True

    async def _send_purchase_email(self, record: RedemptionRecord, download_url: str) -> None:
        if self.mailer is None:
            logfire.warning(f"Mail is not configured, skipping purchase email for order {record.order_id}")
            raise EmailDeliveryError("Mail is not configured")

        items = self.catalog.content_items(record.items)
        attachments = []
        for item in items:
            path = self.assets_dir / item.id
            if not path.is_file():
                raise EmailDeliveryError(f"Content file not found: {item.id}")
            attachments.append(path)

        context = {
            "full_name": record.customer.full_name,
            "email": record.customer.email,
            "package_id": record.package_id,
            "items": [{"title": item.title, "description": item.description} for item in items],
            "download_url": download_url,
            "order_id": record.order_id,
            "payment_id": record.gateway_payment_id,
            "amount": format_amount(record.amount, record.currency),
            "support_email": self.support_email,
        }
        await self.mailer.send_template(
            subject=f"Your PDF Bundle Purchase - {record.package_id}",
            recipients=record.customer.email,
            template_name="purchase_email.html",
            context=context,
            attachments=attachments,
        )
        logfire.info(f"Purchase email sent for order {record.order_id}", extra={"email": record.customer.email})

    async def send_contact_emails(self, message: ContactMessage) -> None:
        """
        Send the admin notice and the customer acknowledgement.

        Raises:
            EmailDeliveryError: when either mail cannot be sent
        """
        if self.mailer is None or not self.admin_email:
            logfire.warning("Contact form used but mail or ADMIN_EMAIL is not configured")
            raise EmailDeliveryError("Failed to send message", status_code=500)

        context = {"full_name": message.full_name, "email": message.email, "issue": message.issue}
        try:
            await self.mailer.send_template(
                subject=f"New support request from {message.full_name}",
                recipients=self.admin_email,
                template_name="contact_admin.html",
                context=context,
                reply_to=message.email,
            )
            await self.mailer.send_template(
                subject="We received your message",
                recipients=message.email,
                template_name="contact_ack.html",
                context={**context, "support_email": self.support_email},
            )
        except Exception as e:
            logfire.exception(f"Failed to send contact emails: {e}")
            raise EmailDeliveryError("Failed to send message", status_code=500) from e
        logfire.info("Contact emails sent", extra={"email": message.email})
