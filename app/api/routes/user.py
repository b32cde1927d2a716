"""
Creation feed endpoints: own creations, public feed, and likes.
"""
import logging
from fastapi import APIRouter, Depends, Body

from app.core.auth_dependency import get_current_entitlement, get_services
from app.schemas.creation import CreationListResponse, CreationResponse, ToggleLikeRequest, ToggleLikeResponse
from app.services.container import ServiceContainer
from app.services.identity_service import UserEntitlement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["Creations"])


@router.get("/get-user-creations", response_model=CreationListResponse)
def get_user_creations(
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """All creations of the authenticated user, newest first."""
    records = services.ledger.list_for_user(snapshot.user_id)
    return CreationListResponse(creations=[CreationResponse.model_validate(r) for r in records])


@router.get("/get-published-creations", response_model=CreationListResponse)
def get_published_creations(
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Public feed, newest first."""
    records = services.ledger.list_published()
    return CreationListResponse(creations=[CreationResponse.model_validate(r) for r in records])


@router.post("/toggle-like-creation", response_model=ToggleLikeResponse)
def toggle_like_creation(
    request: ToggleLikeRequest = Body(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Like or unlike a creation. Not metered."""
    liked = services.ledger.toggle_like(request.id, snapshot.user_id)
    return ToggleLikeResponse(
        liked=liked,
        message="Creation liked" if liked else "Creation disliked",
    )
