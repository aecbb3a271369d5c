"""Bearer token verification.

Tokens are issued by the hosted auth provider. This service only verifies
them and reads the subject claim.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt

from tutorhub.core.config import get_settings
from tutorhub.shared.exceptions import AuthenticationException

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/identity/token", auto_error=False)


def create_access_token(subject: str, expires_minutes: int = 60, **claims: Any) -> str:
    """Sign an access token (used by tests and local tooling)."""
    payload: dict[str, Any] = {
        "sub": subject,
        "type": "access",
        "exp": datetime.now(UTC) + timedelta(minutes=expires_minutes),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate JWT token."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise AuthenticationException("Your session has expired. Please sign in again.") from exc
    except JWTError as exc:
        raise AuthenticationException("Invalid token") from exc
