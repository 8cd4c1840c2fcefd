"""Login, registration, profile and token refresh, plus the bearer-token dependency."""

import hmac
import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.deps import get_app_settings, get_token_issuer
from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    UpstreamUnavailableError,
    ValidationError,
)
from app.core.security import TokenIssuer, hash_password, verify_password
from app.models.user import ROLE_ADMIN
from app.schemas.auth import (
    AuthData,
    AuthResponse,
    CurrentClaims,
    LoginRequest,
    ProfileData,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
    UserOut,
)
from app.services.users import DuplicateEmailError, StoreUnavailableError, UserStore
from app.services.validation import normalize_email, validate_registration

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

# Placeholder identity for the demo login; not stored in the database.
DEMO_EMAIL = "demo@orcamentos.com"
DEMO_PASSWORD = "demo123"
DEMO_USER = UserOut(
    id="00000000-0000-0000-0000-000000000001",
    email=DEMO_EMAIL,
    name="Demo User",
    role=ROLE_ADMIN,
)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """Hash compared against when the email is unknown, so timing matches a real check."""
    return hash_password("not-a-real-password", rounds)


def _is_demo_credentials(email: str, password: str) -> bool:
    email_ok = hmac.compare_digest(email.encode("utf-8"), DEMO_EMAIL.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), DEMO_PASSWORD.encode("utf-8"))
    return email_ok and password_ok


def _authenticate(store: UserStore, email: str, password: str, rounds: int) -> UserOut:
    """Check credentials against the store. Raises AuthenticationError without saying which part failed."""
    try:
        user = store.find_by_email(email)
    except StoreUnavailableError as e:
        raise UpstreamUnavailableError() from e
    if user is None:
        verify_password(password, _dummy_hash(rounds))
        raise AuthenticationError("Invalid credentials")
    if not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return UserOut.model_validate(user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    if not body.email or not body.email.strip() or not body.password:
        raise ValidationError(["Email and password are required"])

    email = normalize_email(body.email)
    if settings.DEMO_LOGIN_ENABLED and _is_demo_credentials(email, body.password):
        user = DEMO_USER
    else:
        user = _authenticate(UserStore(db), email, body.password, settings.BCRYPT_ROUNDS)

    tokens = issuer.issue_pair(user.id, user.email, user.role)
    logger.info("User logged in", extra={"user_id": user.id, "role": user.role})
    return AuthResponse(
        message="Login successful",
        data=AuthData(user=user, tokens=tokens),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthResponse:
    """
    Create a user account and return it with a token pair.

    400 lists every validation problem; 409 when the email is taken, including
    when a concurrent registration wins the race past the pre-check.
    """
    errors = validate_registration(body.name, body.email, body.phone, body.password)
    if errors:
        raise ValidationError(errors)

    store = UserStore(db)
    try:
        if store.find_by_email(body.email) is not None:
            raise ConflictError("Registration failed", [DUPLICATE_EMAIL_MESSAGE])
        password_hash = hash_password(body.password, settings.BCRYPT_ROUNDS)
        created = store.insert(body.name, body.email, body.phone, password_hash)
    except DuplicateEmailError as e:
        logger.info("Registration lost duplicate-email race")
        raise ConflictError("Registration failed", [DUPLICATE_EMAIL_MESSAGE]) from e
    except StoreUnavailableError as e:
        raise UpstreamUnavailableError() from e

    user = UserOut.model_validate(created)
    tokens = issuer.issue_pair(user.id, user.email, user.role)
    logger.info("New user registered", extra={"user_id": user.id})
    return AuthResponse(
        message="Registration successful",
        data=AuthData(user=user, tokens=tokens),
    )


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> CurrentClaims:
    """Dependency: require a valid Bearer access token. 401 if missing, 403 if invalid or expired."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    payload = issuer.verify_access_token(credentials.credentials)
    email = payload.get("email")
    role = payload.get("role")
    if not isinstance(email, str) or not isinstance(role, str):
        raise InvalidTokenError()
    return CurrentClaims(user_id=payload["sub"], email=email, role=role)


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    claims: Annotated[CurrentClaims, Depends(get_current_claims)],
) -> ProfileResponse:
    """Echo the identity carried by the access token. No database read."""
    return ProfileResponse(
        data=ProfileData(
            id=claims.user_id,
            email=claims.email,
            role=claims.role,
            name=DEMO_USER.name if claims.email == DEMO_EMAIL else "User",
        )
    )


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthResponse:
    """Exchange a valid refresh token for a new token pair."""
    if not body.refresh_token:
        raise AuthenticationError("Refresh token required")
    payload = issuer.verify_refresh_token(body.refresh_token)
    user_id = payload["sub"]

    if settings.DEMO_LOGIN_ENABLED and user_id == DEMO_USER.id:
        user = DEMO_USER
    else:
        try:
            found = UserStore(db).find_by_id(user_id)
        except StoreUnavailableError as e:
            raise UpstreamUnavailableError() from e
        if found is None:
            raise InvalidTokenError()
        user = UserOut.model_validate(found)

    tokens = issuer.issue_pair(user.id, user.email, user.role)
    return AuthResponse(
        message="Token refreshed",
        data=AuthData(user=user, tokens=tokens),
    )
