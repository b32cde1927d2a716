"""
Pydantic schemas for creation feed endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class CreationResponse(BaseModel):
    """Schema for a single creation."""
    id: int = Field(..., description="Creation ID")
    user_id: str = Field(..., description="Owning user")
    prompt: str = Field(..., description="Input that produced the content")
    content: str = Field(..., description="Generated text or public asset URL")
    type: str = Field(..., description="article, blog-title, image or resume-review")
    publish: bool = Field(False, description="Visible in the public feed")
    likes: List[str] = Field(default_factory=list, description="User IDs that liked this creation")
    created_at: Optional[datetime] = Field(None, description="When the creation was recorded")

    model_config = ConfigDict(from_attributes=True, json_schema_extra={
        "example": {
            "id": 1,
            "user_id": "user_3f2a",
            "prompt": "Write an article about AI",
            "content": "Artificial intelligence...",
            "type": "article",
            "publish": False,
            "likes": [],
            "created_at": "2026-01-15T10:30:00Z"
        }
    })


class CreationListResponse(BaseModel):
    """Schema for creation list responses."""
    success: bool = True
    creations: List[CreationResponse] = Field(..., description="Creations, newest first")


class ToggleLikeRequest(BaseModel):
    """Request schema for toggling a like."""
    id: int = Field(..., description="Creation ID")


class ToggleLikeResponse(BaseModel):
    """Response schema for toggling a like."""
    success: bool = True
    liked: bool = Field(..., description="Whether the caller now likes the creation")
    message: str = Field(..., description="Creation liked / Creation disliked")
