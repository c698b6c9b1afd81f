# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token verification.

This module validates bearer tokens using python-jose. Tokens are issued
elsewhere; SheetLMS only verifies them and reads two claims:
- sub: the user ID
- role: student, instructor or admin

Example:
    >>> from sheetlms.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> claims = jwt_manager.decode_token(token)
    >>> claims.role
    <UserRole.STUDENT: 'student'>
"""

import logging

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, field_validator

from sheetlms.core.config.settings import JWTSettings
from sheetlms.models.entities import UserRole

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        role: The user's role; unknown roles read as student.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
    """

    sub: str
    role: UserRole = UserRole.STUDENT
    exp: int | None = None
    iat: int | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> object:
        text = str(value or "").strip().lower()
        if text not in {role.value for role in UserRole}:
            return UserRole.STUDENT
        return text


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the signature or claims are invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JoseJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")

        return TokenPayload(
            sub=str(payload["sub"]),
            role=payload.get("role"),
            exp=payload.get("exp"),
            iat=payload.get("iat"),
        )

    def verify_token(self, token: str) -> bool:
        """Verify if a token is valid.

        Args:
            token: JWT token string.

        Returns:
            True if token is valid, False otherwise.
        """
        try:
            self.decode_token(token)
            return True
        except JWTError:
            return False
