"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=72)
    confirm_password: str = Field(..., min_length=1, max_length=72)
    email: str = Field(..., min_length=3, max_length=255)
    bio: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


class RegisterResponse(BaseModel):
    id: int
    username: str


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    access_token: str = Field(..., description="Signed session token")
    token_type: str = Field("bearer", description="Token type")
    expires_at: datetime


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields stay unchanged."""

    bio: str | None = Field(None, max_length=2000)
    email: str | None = Field(None, min_length=3, max_length=255)
    password: str | None = Field(None, min_length=1, max_length=72)


class UserResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""

    id: int
    username: str
    email: str
    email_hash: str
    bio: str | None
    role: str
    created_at: datetime
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PublicProfileResponse(BaseModel):
    """Profile as shown to other visitors."""

    username: str
    bio: str | None
    role: str
    created_at: datetime
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)
