"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from api.dependencies import get_identity_providers
from port.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(
    providers: dict[str, IdentityProvider] = Depends(get_identity_providers),
):
    """Health check endpoint with configured identity providers."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {
            "user_store": {"status": "healthy", "message": "In-memory store"},
            "identity_providers": sorted(providers),
        },
    }
