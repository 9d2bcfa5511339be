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
TokenManager component for acquiring and caching bearer tokens.
"""

import json

import anyio
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from pandago.assertion import AssertionSigner
from pandago.config import PandagoConfig
from pandago.exceptions import AuthenticationError
from pandago.models import DEFAULT_EXPIRY_THRESHOLD, Token, TokenResponse
from pandago.transport import Transport
from pandago.utils.logger import logger

tracer = trace.get_tracer(__name__)

CLIENT_CREDENTIALS_GRANT = "client_credentials"
JWT_BEARER_ASSERTION_TYPE = "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"


class TokenManager:
    """
    Obtains bearer tokens with the client-credentials grant and caches the current one.

    At most one refresh is in flight per instance: callers that find the cache stale
    wait on the lock and then reuse the token the first caller installed.

    Attributes:
        config (PandagoConfig): The client configuration.
        transport (Transport): The transport used to reach the token endpoint.
        signer (AssertionSigner): Builds the client assertion for every token request.
        threshold (int): Seconds before literal expiry at which a token counts as expired.
    """

    def __init__(
        self,
        config: PandagoConfig,
        transport: Transport,
        signer: AssertionSigner | None = None,
        threshold: int = DEFAULT_EXPIRY_THRESHOLD,
    ) -> None:
        self.config = config
        self.transport = transport
        self.signer = signer or AssertionSigner()
        self.threshold = threshold
        self._token: Token | None = None
        self._lock: anyio.Lock | None = None

    def _cached_token(self) -> Token | None:
        token = self._token
        if token is not None and not token.is_expired(self.threshold):
            return token
        return None

    def invalidate(self) -> None:
        """Drops the cached token so the next `get_token` call requests a new one."""
        self._token = None

    async def get_token(self) -> Token:
        """
        Returns a valid token, requesting a new one if the cached token is missing or stale.

        Returns:
            Token: A token valid for at least `threshold` more seconds.

        Raises:
            AuthenticationError: If a new token cannot be obtained, whatever the cause.
        """
        if self._lock is None:
            self._lock = anyio.Lock()

        # Double-checked locking pattern optimization (Check 1: No lock)
        token = self._cached_token()
        if token is not None:
            return token

        async with self._lock:
            # Check 2: another caller may have refreshed while we waited
            token = self._cached_token()
            if token is not None:
                return token

            with tracer.start_as_current_span("pandago.token.refresh") as span:
                try:
                    token = await self._request_token()
                except Exception as e:
                    logger.error(f"Failed to request token: {type(e).__name__}: {e}")
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise AuthenticationError(f"Failed to authenticate with pandago: {e}") from e

                self._token = token
                span.set_status(Status(StatusCode.OK))
                return token

    async def _request_token(self) -> Token:
        """
        Exchanges a freshly signed assertion for a bearer token.

        Returns:
            Token: The newly issued token.

        Raises:
            AuthenticationError: If the token endpoint rejects the request or answers with an invalid body.
        """
        assertion = self.signer.sign(self.config)

        response = await self.transport.send(
            "POST",
            self.config.auth_url,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={
                "grant_type": CLIENT_CREDENTIALS_GRANT,
                "client_id": self.config.client_id,
                "client_assertion_type": JWT_BEARER_ASSERTION_TYPE,
                "client_assertion": assertion,
                "scope": self.config.scope,
            },
        )

        if response.status_code != 200:
            description = "Unknown error"
            try:
                error = response.decode_json()
            except (json.JSONDecodeError, UnicodeDecodeError):
                error = None
            if isinstance(error, dict) and error.get("error_description"):
                description = str(error["error_description"])
            raise AuthenticationError(description)

        try:
            payload = TokenResponse(**response.decode_json())
            return Token.issue(payload.access_token, payload.expires_in)
        except (TypeError, ValueError, ValidationError) as e:
            raise AuthenticationError("Invalid token response from pandago") from e
