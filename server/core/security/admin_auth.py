"""Shared-secret check for the admin endpoints."""
import hmac
from typing import Optional

import logfire
from fastapi import Depends, Header, Query

from server.core.context import AppContext, get_context
from server.core.errors import UnauthorizedError


class AdminKeyVerifier:
    """Compares a supplied key against ADMIN_SECRET_KEY."""

    @staticmethod
    def verify_key(supplied_key: Optional[str], secret: str) -> bool:
        """
        Verify the admin key in constant time.

        Args:
            supplied_key: The key from the `key` query parameter or `X-Admin-Key` header
            secret: The configured ADMIN_SECRET_KEY

        Returns:
            True if the key matches, False otherwise. Always False when no secret is configured.
        """
        if not secret:
            logfire.warning("Admin request rejected: ADMIN_SECRET_KEY is not configured.")
            return False

        if not supplied_key:
            logfire.warning("Admin request rejected: Missing admin key.")
            return False

        if not hmac.compare_digest(supplied_key.encode("utf-8"), secret.encode("utf-8")):
            logfire.warning("Admin request rejected: Invalid admin key.")
            return False

        return True


async def require_admin_key(
    key: Optional[str] = Query(None),
    x_admin_key: Optional[str] = Header(None),
    context: AppContext = Depends(get_context),
) -> None:
    """
    FastAPI dependency guarding the admin endpoints.

    Raises:
        UnauthorizedError: If the key is missing, wrong or no secret is configured
    """
    if not AdminKeyVerifier.verify_key(key or x_admin_key, context.settings.ADMIN_SECRET_KEY):
        raise UnauthorizedError("Unauthorized")
