"""
Contact form relay.
"""
import re

from fastapi import APIRouter, Depends

from server.core.context import AppContext, get_context
from server.core.errors import ValidationError
from server.core.models.api_models import ContactRequest, MessageResponse
from server.core.service.email_service.purchase_notifier import ContactMessage

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_contact(request: ContactRequest) -> ContactMessage:
    full_name, email, issue = ((value or "").strip() for value in (request.full_name, request.email, request.issue))
    if not (full_name and email and issue):
        raise ValidationError("All fields (fullName, email, issue) are required")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please provide a valid email address")
    return ContactMessage(full_name=full_name, email=email, issue=issue)


@router.post("/contact", response_model=MessageResponse)
async def contact(request: ContactRequest, context: AppContext = Depends(get_context)) -> MessageResponse:
    """Send the support request to the admin and an acknowledgement to the customer."""
    message = parse_contact(request)
    await context.notifier.send_contact_emails(message)
    return MessageResponse(message="Your message has been sent. We'll get back to you soon.")
