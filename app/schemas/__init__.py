"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthData,
    AuthResponse,
    CurrentClaims,
    LoginRequest,
    ProfileData,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserOut,
)
from app.schemas.health import CacheHealth, DatabaseHealth, HealthResponse
from app.schemas.proposals import Proposal, ProposalListResponse, ProposalPage

__all__ = [
    "AuthData",
    "AuthResponse",
    "CacheHealth",
    "CurrentClaims",
    "DatabaseHealth",
    "HealthResponse",
    "LoginRequest",
    "ProfileData",
    "ProfileResponse",
    "Proposal",
    "ProposalListResponse",
    "ProposalPage",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPair",
    "UserOut",
]
