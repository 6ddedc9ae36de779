"""
Checkout endpoints: package listing, order creation, payment verification
and re-sending the purchase email.
"""
from fastapi import APIRouter, BackgroundTasks, Depends

from server.core.context import AppContext, get_context
from server.core.models.api_models import (
    CreateOrderRequest,
    CreateOrderResponse,
    MessageResponse,
    PackageListResponse,
    PackageSummary,
    ResendEmailRequest,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from server.core.service.payment_verification.verifiers import VerificationInput

router = APIRouter()


@router.get("/packages", response_model=PackageListResponse)
async def list_packages(context: AppContext = Depends(get_context)) -> PackageListResponse:
    """List the purchasable packages with prices in minor units."""
    return PackageListResponse(packages=[
        PackageSummary(
            id=package.id,
            price=package.price,
            currency=context.settings.CURRENCY,
            description=package.description,
            items=list(package.items),
        )
        for package in context.catalog.list_packages()
    ])


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    request: CreateOrderRequest,
    context: AppContext = Depends(get_context),
) -> CreateOrderResponse:
    """
    Open a gateway order for a package.

    Returns the order id and amount the browser checkout needs. Responds 400
    for blank fields or an unknown package and 500 if the gateway fails.
    """
    created = await context.purchases.create_order(
        request.full_name, request.email, request.mobile, request.package_id)
    return CreateOrderResponse(
        order_id=created.order_id,
        amount=created.amount,
        currency=created.currency,
        gateway_session_ref=created.gateway_session_ref,
        gateway_key_id=created.gateway_key_id,
    )


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(
    request: VerifyPaymentRequest,
    background_tasks: BackgroundTasks,
    context: AppContext = Depends(get_context),
) -> VerifyPaymentResponse:
    """
    Confirm a payment and issue the download token.

    The purchase email is sent in the background after the response, a mail
    failure never changes the outcome of this call.
    """
    confirmation = await context.purchases.verify_payment(VerificationInput(
        order_id=request.order_id or "",
        payment_id=request.payment_id,
        signature=request.signature,
    ))
    record = confirmation.record
    background_tasks.add_task(context.notifier.send_purchase_email, record, confirmation.download_url)

    return VerifyPaymentResponse(
        download_url=confirmation.download_url,
        download_token=record.token,
        per_item_download_urls=confirmation.item_urls,
        customer=record.customer,
    )


@router.post("/resend-email", response_model=MessageResponse)
async def resend_email(
    request: ResendEmailRequest,
    background_tasks: BackgroundTasks,
    context: AppContext = Depends(get_context),
) -> MessageResponse:
    """Queue the purchase email again for an existing download token."""
    confirmation = context.purchases.resend_target(request.token)
    background_tasks.add_task(
        context.notifier.send_purchase_email, confirmation.record, confirmation.download_url)
    return MessageResponse(message="Email queued for delivery")
