"""Permission actions checked by the recommendation API."""

import enum


class PermissionAction(str, enum.Enum):
    """Permissions carried in storefront access tokens that this service checks."""
    # Shopper-facing recommendations need only a valid token
    AI_RECOMMENDATIONS = "ai:recommendations"
    CASHBACK_READ = "cashback:read"
