"""Security modules."""
from server.core.security.admin_auth import (
    AdminKeyVerifier,
    require_admin_key,
)

__all__ = [
    "AdminKeyVerifier",
    "require_admin_key",
]
