"""Outbound email."""
from server.core.service.email_service.email_send_service import EmailSendService
from server.core.service.email_service.purchase_notifier import ContactMessage, PurchaseNotifier

__all__ = ["ContactMessage", "EmailSendService", "PurchaseNotifier"]
