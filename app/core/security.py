"""Password hashing and JWT access/refresh token issuance and verification."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.errors import InvalidTokenError
from app.schemas.auth import TokenPair

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (bcrypt compares in constant time)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenIssuer:
    """
    Signs and verifies the stateless token pair.

    Access and refresh tokens are signed with different secrets and carry a
    "type" claim, so neither can be replayed as the other.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenIssuer":
        return cls(
            access_secret=settings.JWT_SECRET.get_secret_value(),
            refresh_secret=settings.JWT_REFRESH_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
        )

    def _sign(self, payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {**payload, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: str, email: str, role: str) -> str:
        """Create a short-lived access token with sub, email, role, type and exp."""
        payload = {"sub": str(user_id), "email": email, "role": role, "type": ACCESS_TOKEN_TYPE}
        return self._sign(payload, self.access_secret, self.access_ttl)

    def issue_refresh_token(self, user_id: str) -> str:
        """Create a long-lived refresh token carrying only sub and the refresh type marker."""
        payload = {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE}
        return self._sign(payload, self.refresh_secret, self.refresh_ttl)

    def issue_pair(self, user_id: str, email: str, role: str) -> TokenPair:
        expires_at = datetime.now(UTC) + self.access_ttl
        return TokenPair(
            access_token=self.issue_access_token(user_id, email, role),
            refresh_token=self.issue_refresh_token(user_id),
            expires_at=expires_at.isoformat().replace("+00:00", "Z"),
            expires_in=int(self.access_ttl.total_seconds()),
        )

    def verify(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        """
        Decode and validate a token; return its claims.
        Raises InvalidTokenError on bad signature, expiry, malformed token or type mismatch.
        """
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        if claims.get("type") != expected_type or not claims.get("sub"):
            raise InvalidTokenError()
        return claims

    def verify_access_token(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.refresh_secret, REFRESH_TOKEN_TYPE)
