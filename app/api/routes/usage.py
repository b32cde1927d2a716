"""
Usage tracking endpoints.

Provides usage statistics and quota information for authenticated users.
"""
import logging
from fastapi import APIRouter, Depends, status

from app.core.auth_dependency import get_current_entitlement, get_services
from app.schemas.usage import UsageResponse
from app.services.container import ServiceContainer
from app.services.identity_service import UserEntitlement
from app.services.quota_service import get_usage_for_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me", tags=["Usage"])


@router.get("/usage", status_code=status.HTTP_200_OK, response_model=UsageResponse)
def get_usage(
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """
    Get free usage statistics for the authenticated user.

    Returns:
    - plan: free or premium
    - free_usage / limit / remaining (limit and remaining are None for premium)
    - capabilities: cost, premium flag and availability per capability

    Requires authentication via Bearer token.
    """
    usage_data = get_usage_for_response(snapshot, limit=services.generation.free_limit)

    logger.debug(f"Usage summary requested: user_id={snapshot.user_id}, plan={usage_data['plan']}")

    return usage_data
