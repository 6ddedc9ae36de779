"""Admin statistics, guarded by ADMIN_SECRET_KEY."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from server.core.context import AppContext, get_context
from server.core.models.api_models import PaymentCountResponse, StatsResponse
from server.core.security.admin_auth import require_admin_key
from server.core.service.stats.admin_stats import compute_stats, payment_count

router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.get("/admin/stats", response_model=StatsResponse)
def admin_stats(context: AppContext = Depends(get_context)) -> StatsResponse:
    return compute_stats(context.redemptions.records(), now=datetime.now(timezone.utc))


@router.get("/private/payment-count", response_model=PaymentCountResponse)
def private_payment_count(context: AppContext = Depends(get_context)) -> PaymentCountResponse:
    return payment_count(context.redemptions.records())
