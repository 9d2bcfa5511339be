# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

"""
Data models for the pandago package.
"""

import time

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_EXPIRY_THRESHOLD = 60


class Token(BaseModel):
    """
    A bearer token issued by the pandago token service.

    This model is frozen (immutable): a refresh replaces the cached instance instead
    of mutating it.

    Attributes:
        access_token (SecretStr): The opaque bearer credential. Protected from logging.
        expires_at (float): Absolute expiry as epoch seconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    access_token: SecretStr = Field(..., description="The opaque bearer credential.")
    expires_at: float = Field(..., description="Absolute expiry instant in epoch seconds.")

    @classmethod
    def issue(cls, access_token: str, expires_in: int, now: float | None = None) -> "Token":
        """
        Creates a token expiring `expires_in` seconds after `now`.

        Args:
            access_token: The access token string.
            expires_in: The server-declared lifetime in seconds. Must be positive.
            now: The issue instant. Defaults to the current time.

        Returns:
            Token: The new token.

        Raises:
            ValueError: If `expires_in` is not positive.
        """
        if expires_in <= 0:
            raise ValueError(f"Token lifetime must be positive, got {expires_in}")
        issued_at = time.time() if now is None else now
        return cls(access_token=SecretStr(access_token), expires_at=issued_at + expires_in)

    @property
    def bearer(self) -> str:
        """The plain access token, for the Authorization header."""
        return self.access_token.get_secret_value()

    def is_expired(self, threshold: int = DEFAULT_EXPIRY_THRESHOLD, now: float | None = None) -> bool:
        """
        Checks whether the token is expired, or will be within `threshold` seconds.

        Args:
            threshold: Safety margin in seconds before the literal expiry.
            now: The instant to check against. Defaults to the current time.

        Returns:
            bool: True if the token should no longer be used.
        """
        current = time.time() if now is None else now
        return self.expires_at - threshold < current


class TokenResponse(BaseModel):
    """
    Successful response of the token endpoint.

    Attributes:
        access_token (str): The access token issued by the authorization server.
        expires_in (int): The lifetime in seconds of the access token.
        token_type (str | None): The type of the token (e.g. "Bearer").
        scope (str | None): The granted scope, if echoed back.
    """

    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: int
    token_type: str | None = None
    scope: str | None = None
