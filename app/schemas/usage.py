"""
Pydantic schemas for usage endpoints.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class CapabilityUsageDetail(BaseModel):
    """Gate policy for a single capability as it applies to the caller."""
    capability: str = Field(..., description="Capability name")
    cost: int = Field(..., description="Free-usage units charged per call (0 for premium)")
    premium_required: bool = Field(..., description="Whether the capability is premium-only")
    available: bool = Field(..., description="Whether the caller may use it right now")


class UsageResponse(BaseModel):
    """Response schema for GET /me/usage."""
    success: bool = True
    plan: str = Field(..., description="free or premium")
    free_usage: int = Field(..., description="Free usage units consumed")
    limit: Optional[int] = Field(None, description="Free usage limit (None for premium)")
    remaining: Optional[int] = Field(None, description="Remaining units (None for premium)")
    unlimited: bool = Field(..., description="Whether usage is unmetered")
    capabilities: List[CapabilityUsageDetail] = Field(..., description="Per-capability policy")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "plan": "free",
            "free_usage": 4,
            "limit": 10,
            "remaining": 6,
            "unlimited": False,
            "capabilities": [
                {"capability": "article", "cost": 1, "premium_required": False, "available": True},
                {"capability": "image", "cost": 1, "premium_required": True, "available": False}
            ]
        }
    })
