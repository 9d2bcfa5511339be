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
AssertionSigner component for building the JWT bearer client assertion (RFC 7523).
"""

import time
import uuid
from typing import Any, cast

from authlib.jose import JsonWebToken

from pandago.config import PandagoConfig
from pandago.exceptions import AuthenticationError

ASSERTION_ALGORITHM = "RS256"
DEFAULT_ASSERTION_LIFETIME = 3600


class AssertionSigner:
    """
    Builds and signs short-lived, single-use client assertions.

    Attributes:
        lifetime (int): Seconds until the assertion's `exp` claim.
    """

    def __init__(self, lifetime: int = DEFAULT_ASSERTION_LIFETIME) -> None:
        self.lifetime = lifetime
        # Only RS256 is accepted by the token service
        self.jwt = JsonWebToken([ASSERTION_ALGORITHM])

    def build_claims(self, config: PandagoConfig, now: int | None = None) -> dict[str, Any]:
        """
        Builds the claim set for a new assertion. A fresh `jti` is generated on every call.

        Args:
            config: The client configuration.
            now: The issue instant in epoch seconds. Defaults to the current time.

        Returns:
            dict[str, Any]: The `iss`, `sub`, `jti`, `exp` and `aud` claims.
        """
        issued_at = int(time.time()) if now is None else now
        return {
            "iss": config.client_id,
            "sub": config.client_id,
            "jti": str(uuid.uuid4()),
            "exp": issued_at + self.lifetime,
            "aud": config.audience,
        }

    def sign(self, config: PandagoConfig) -> str:
        """
        Signs a new assertion with the configured private key.

        Args:
            config: The client configuration providing client ID, key ID, key and audience.

        Returns:
            str: The compact serialized JWT.

        Raises:
            AuthenticationError: If the key is malformed or signing fails for any other reason.
        """
        header = {"alg": ASSERTION_ALGORITHM, "typ": "JWT", "kid": config.key_id}
        claims = self.build_claims(config)

        try:
            jwt_any = cast("Any", self.jwt)
            token = jwt_any.encode(header, claims, config.private_key.get_secret_value())
        except Exception as e:
            raise AuthenticationError(f"Failed to sign client assertion: {e}") from e

        if isinstance(token, bytes):
            return token.decode("utf-8")
        return str(token)
