"""
Pydantic schemas for AI generation endpoints.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.creation import CreationResponse


class ArticleRequest(BaseModel):
    """Request model for article generation."""
    prompt: str = Field(..., min_length=1, description="Article prompt")
    length: Optional[int] = Field(None, gt=0, le=8000, description="Maximum tokens to generate")
    publish: bool = Field(False, description="Show the result in the public feed")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "prompt": "Write an article about the future of remote work",
            "length": 800
        }
    })


class BlogTitleRequest(BaseModel):
    """Request model for blog title generation."""
    prompt: str = Field(..., min_length=1, description="Topic and category for the titles")
    publish: bool = Field(False, description="Show the result in the public feed")


class ImageRequest(BaseModel):
    """Request model for text-to-image generation."""
    prompt: str = Field(..., min_length=1, description="Image description")
    publish: bool = Field(False, description="Show the result in the public feed")


class GenerationResponse(BaseModel):
    """Successful generation outcome."""
    success: bool = Field(True, description="Always true for a delivered result")
    content: str = Field(..., description="Generated text or public URL of the generated image")
    creation: Optional[CreationResponse] = Field(None, description="Recorded creation (absent if it could not be saved)")
    free_usage: int = Field(..., description="Free usage counter after this request")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems (e.g. usage not recorded)")
