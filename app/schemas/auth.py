"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import ConfigDict, Field

from app.schemas.common import CamelModel, RequestModel


class LoginRequest(RequestModel):
    """Credentials for login. Presence is checked by the handler, not the schema."""

    email: str | None = Field(default=None, description="Account email")
    password: str | None = Field(default=None, description="Password")


class RegisterRequest(RequestModel):
    """Credential submission for registration; validated by the credential validator."""

    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email (unique, case-insensitive)")
    phone: str | None = Field(default=None, description="Mobile phone as (XX) 9XXXX-XXXX")
    password: str | None = Field(default=None, description="Password (8+ chars, upper, lower, digit)")


class RefreshRequest(RequestModel):
    refresh_token: str | None = Field(default=None, description="Refresh token from login or register")


class TokenPair(CamelModel):
    """Access/refresh token envelope returned after login, register or refresh."""

    access_token: str = Field(..., description="Short-lived JWT access token")
    refresh_token: str = Field(..., description="Long-lived JWT refresh token")
    expires_at: str = Field(..., description="Access token expiry (ISO-8601, UTC)")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class UserOut(CamelModel):
    """Public user representation (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: str
    phone: str | None = None
    created_at: datetime | None = None


class AuthData(CamelModel):
    user: UserOut
    tokens: TokenPair


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    data: AuthData


class ProfileData(CamelModel):
    """Claims echoed from a verified access token."""

    id: str
    email: str
    role: str
    name: str


class ProfileResponse(CamelModel):
    success: bool = True
    message: str = "Profile retrieved successfully"
    data: ProfileData


class CurrentClaims(CamelModel):
    """Verified access-token claims injected into protected handlers."""

    user_id: str
    email: str
    role: str
