# workspace_rbac/adapters/outbound/security/token_manager.py

"""
Bearer token handling for the HTTP boundary.

Tokens are issued by the identity service; this module only needs to read
them (and to mint them for tooling and tests). The subject is the user UUID.
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pydantic import SecretStr

from workspace_rbac.adapters.configuration.config import settings

# Configurar logger
logger = logging.getLogger(__name__)

JWT_SECRET: str = (
    settings.SECRET_KEY.get_secret_value()
    if isinstance(settings.SECRET_KEY, SecretStr)
    else settings.SECRET_KEY
)
JWT_ALGORITHM: str = settings.ALGORITHM


class InvalidTokenError(Exception):
    """Token could not be decoded or carries no usable subject."""


class TokenManager:
    """Encode and decode user access tokens."""

    @staticmethod
    def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta
        payload = {
            "sub": str(subject),
            "exp": int(expire.timestamp()),
            "type": "user",
            "jti": str(uuid.uuid4()),
        }
        token = jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
        logger.debug(f"Access token created for subject={subject}")
        return token

    @staticmethod
    def decode_subject(token: str) -> uuid.UUID:
        """
        Validate the token and return its subject as UUID.

        Raises:
            InvalidTokenError: if the token is invalid, expired or has no UUID subject
        """
        try:
            payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            logger.warning(f"Invalid or expired access token: {e}")
            raise InvalidTokenError("Invalid or expired token.") from e

        sub = payload.get("sub")
        try:
            return uuid.UUID(str(sub))
        except (ValueError, TypeError) as e:
            logger.warning(f"Access token with invalid subject: {sub!r}")
            raise InvalidTokenError("Invalid token subject.") from e
