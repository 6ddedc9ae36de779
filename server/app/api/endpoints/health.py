"""
Health check endpoints.
"""
from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Depends

from server.core.context import AppContext, get_context

router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Liveness check.
    """
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/detailed")
async def detailed_health_check(context: AppContext = Depends(get_context)) -> Dict[str, Any]:
    """
    Readiness check with the configured collaborators and ledger sizes.
    """
    settings = context.settings
    return {
        "status": "OK",
        "service": "snapvault-api",
        "version": settings.VERSION,
        "gateway": settings.PAYMENT_GATEWAY,
        "verifier": context.verifier.name,
        "mailConfigured": context.notifier.mailer is not None,
        "pendingOrders": len(context.orders),
        "redemptions": len(context.redemptions),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
