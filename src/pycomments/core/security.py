"""
Security utilities for PyComments.

Provides session token decoding and action-scoped anti-forgery nonces.
Both are JWTs signed with the application secret key.
"""

import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel

from pycomments.core.config import settings

ALGORITHM = "HS256"

# Subject used for nonces issued to anonymous visitors
ANONYMOUS_SUBJECT = "0"


class TokenPayload(BaseModel):
    """JWT token payload model."""

    sub: str  # Subject (user ID)
    exp: datetime
    iat: datetime
    type: str  # "access" or "nonce"
    jti: str | None = None
    action: str | None = None  # Only set on nonces


# =============================================================================
# Session Tokens
# =============================================================================


def create_access_token(
    subject: str | int,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """
    Create a JWT access token.

    Access tokens are issued by the host platform's login flow; this
    service only reads them. The helper exists for tooling and tests.

    Args:
        subject: Token subject (user ID)
        expires_delta: Custom expiration time
        extra_claims: Additional claims to include

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=30))

    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "iat": now,
        "type": "access",
        "jti": secrets.token_urlsafe(16),
    }

    if extra_claims:
        to_encode.update(extra_claims)

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str, secret_key: str | None = None) -> TokenPayload | None:
    """
    Decode and validate a JWT token.

    Signature and expiration are checked by python-jose.

    Args:
        token: JWT token to decode
        secret_key: Key to verify with (defaults to the application secret)

    Returns:
        TokenPayload if valid, None otherwise
    """
    try:
        payload = jwt.decode(token, secret_key or settings.secret_key, algorithms=[ALGORITHM])
        return TokenPayload(
            sub=str(payload["sub"]),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
            action=payload.get("action"),
        )
    except (JWTError, KeyError, ValueError):
        return None


def user_id_from_token(token: str | None) -> int | None:
    """
    Resolve the user ID carried by a session access token.

    Returns None for missing, invalid, expired or non-access tokens, and for
    subjects that are not positive integers.
    """
    if not token:
        return None

    payload = decode_token(token)
    if payload is None or payload.type != "access":
        return None

    if not payload.sub.isdigit():
        return None
    user_id = int(payload.sub)
    return user_id or None


# =============================================================================
# Anti-forgery Nonces
# =============================================================================


class NonceVerifier(ABC):
    """Issues and checks action-scoped anti-forgery tokens."""

    @abstractmethod
    def create(self, action: str, user_id: int | None) -> str:
        """Issue a token for ``action`` bound to ``user_id``."""

    @abstractmethod
    def verify(self, action: str, token: str | None, user_id: int | None) -> bool:
        """Return True if ``token`` was issued for ``action`` and ``user_id``."""


class JWTNonceManager(NonceVerifier):
    """
    Nonces as short-lived signed JWTs.

    A nonce carries the action name and the user it was issued to, so a
    token lifted from one user's page or one form cannot be replayed
    against another.
    """

    def __init__(self, secret_key: str, lifetime: timedelta) -> None:
        self.secret_key = secret_key
        self.lifetime = lifetime

    def create(self, action: str, user_id: int | None) -> str:
        now = datetime.now(timezone.utc)
        to_encode: dict[str, Any] = {
            "sub": str(user_id) if user_id else ANONYMOUS_SUBJECT,
            "exp": now + self.lifetime,
            "iat": now,
            "type": "nonce",
            "action": action,
            "jti": secrets.token_urlsafe(8),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify(self, action: str, token: str | None, user_id: int | None) -> bool:
        if not token:
            return False

        payload = decode_token(token, secret_key=self.secret_key)
        if payload is None or payload.type != "nonce":
            return False

        expected_subject = str(user_id) if user_id else ANONYMOUS_SUBJECT
        return secrets.compare_digest(
            (payload.action or "").encode("utf-8"), action.encode("utf-8")
        ) and secrets.compare_digest(payload.sub.encode("utf-8"), expected_subject.encode("utf-8"))


def get_nonce_manager() -> JWTNonceManager:
    """Build the nonce manager from application settings."""
    return JWTNonceManager(
        secret_key=settings.secret_key,
        lifetime=timedelta(minutes=settings.nonce_lifetime_minutes),
    )
