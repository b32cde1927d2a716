"""
Pydantic schemas for authentication endpoints.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict


class SignupRequest(BaseModel):
    """Request schema for user signup."""
    full_name: str = Field(..., min_length=1, max_length=200, description="User's full name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password (min 8 characters)")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        password_bytes = v.encode("utf-8")
        if len(password_bytes) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "full_name": "Jane Doe",
            "email": "jane.doe@example.com",
            "password": "SecurePass123"
        }
    })


class SignupResponse(BaseModel):
    success: bool = True
    user_id: str
    message: str = "User created successfully"


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
