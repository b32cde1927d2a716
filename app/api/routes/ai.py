"""
AI generation endpoints.

Every endpoint maps to one Capability and goes through GenerationService, so the
quota gate is applied uniformly. Outcomes use {"success": ...} payloads.
"""
import logging
from fastapi import APIRouter, Depends, File, Form, UploadFile, Body

from app.core.auth_dependency import get_current_entitlement, get_services
from app.core.capabilities import Capability
from app.schemas.ai import ArticleRequest, BlogTitleRequest, ImageRequest, GenerationResponse
from app.schemas.creation import CreationResponse
from app.services.capability_service import CapabilityRequest
from app.services.container import ServiceContainer
from app.services.generation_service import GenerationOutcome
from app.services.identity_service import UserEntitlement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])


# ============================================
# Helper Functions
# ============================================

def _run(
    services: ServiceContainer,
    snapshot: UserEntitlement,
    capability: Capability,
    request: CapabilityRequest,
) -> GenerationResponse:
    outcome: GenerationOutcome = services.generation.generate(snapshot, capability, request)
    creation = CreationResponse.model_validate(outcome.creation) if outcome.creation else None
    return GenerationResponse(
        content=outcome.content,
        creation=creation,
        free_usage=outcome.free_usage,
        warnings=outcome.warnings,
    )


def _upload_request(upload: UploadFile, **fields) -> CapabilityRequest:
    return CapabilityRequest(
        file_bytes=upload.file.read(),
        filename=upload.filename,
        content_type=upload.content_type,
        **fields,
    )


# ============================================
# Endpoints
# ============================================

@router.post("/generate-article", response_model=GenerationResponse)
def generate_article(
    request: ArticleRequest = Body(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Generate an article. Metered for free users."""
    return _run(services, snapshot, Capability.ARTICLE, CapabilityRequest(
        prompt=request.prompt,
        length=request.length,
        publish=request.publish,
    ))


@router.post("/generate-blog-title", response_model=GenerationResponse)
def generate_blog_title(
    request: BlogTitleRequest = Body(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Generate blog titles. Metered for free users."""
    return _run(services, snapshot, Capability.BLOG_TITLE, CapabilityRequest(
        prompt=request.prompt,
        publish=request.publish,
    ))


@router.post("/generate-image", response_model=GenerationResponse)
def generate_image(
    request: ImageRequest = Body(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Generate an image from text. Premium only."""
    return _run(services, snapshot, Capability.IMAGE, CapabilityRequest(
        prompt=request.prompt,
        publish=request.publish,
    ))


@router.post("/remove-image-background", response_model=GenerationResponse)
def remove_image_background(
    image: UploadFile = File(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Remove the background from an uploaded image. Premium only."""
    return _run(services, snapshot, Capability.REMOVE_BACKGROUND, _upload_request(image))


@router.post("/remove-image-object", response_model=GenerationResponse)
def remove_image_object(
    image: UploadFile = File(...),
    object: str = Form(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Remove a named object from an uploaded image. Premium only."""
    return _run(services, snapshot, Capability.REMOVE_OBJECT, _upload_request(image, object_name=object))


@router.post("/resume-review", response_model=GenerationResponse)
def resume_review(
    resume: UploadFile = File(...),
    snapshot: UserEntitlement = Depends(get_current_entitlement),
    services: ServiceContainer = Depends(get_services),
):
    """Review an uploaded PDF resume. Metered for free users at a higher cost."""
    return _run(services, snapshot, Capability.RESUME_REVIEW, _upload_request(resume))
