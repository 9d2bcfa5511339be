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
HTTP transport used by the token manager and the request pipeline.
"""

from typing import Any, Protocol

import httpx
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from pandago.exceptions import OversizedResponseError, TransportError
from pandago.models_internal import TransportResponse
from pandago.utils.logger import logger

DEFAULT_MAX_RESPONSE_BYTES = 10_000_000

_SUPPORTED_OPTIONS = frozenset({"headers", "data", "json", "params"})


class Transport(Protocol):
    """
    Minimal request contract the SDK depends on.

    Implementations return a fully read response for every HTTP status and raise
    for failures that produced no response (DNS, connect, timeout, ...).
    """

    async def send(self, method: str, url: str, **options: Any) -> TransportResponse:
        """
        Sends a request.

        Args:
            method: The HTTP method.
            url: Absolute URL, or a path relative to the transport's base URL.
            **options: Any of `headers`, `data` (form fields), `json`, `params`.
        """
        ...

    async def aclose(self) -> None:
        """Releases the underlying resources."""
        ...


class HttpxTransport:
    """
    `Transport` backed by an `httpx.AsyncClient`.

    Bodies are streamed and capped at `max_response_bytes`. Retries, pooling and TLS
    are left to httpx and to whoever configures the client.

    Attributes:
        max_response_bytes (int): Largest accepted response body.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
    ) -> None:
        """
        Initialize the HttpxTransport.

        Args:
            base_url: Base URL for relative paths. Absolute URLs bypass it.
            timeout: Request timeout in seconds.
            client: External async client (optional). It is not closed by `aclose`.
            max_response_bytes: Largest accepted response body in bytes.
        """
        self._internal_client = client is None
        if client is None:
            client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
            # Instrument the client for distributed tracing
            HTTPXClientInstrumentor().instrument_client(client)
        self._client = client
        self.max_response_bytes = max_response_bytes

    async def send(self, method: str, url: str, **options: Any) -> TransportResponse:
        unknown = set(options) - _SUPPORTED_OPTIONS
        if unknown:
            raise TransportError(f"Unsupported request options: {', '.join(sorted(unknown))}")

        try:
            async with self._client.stream(method, url, **options) as response:
                content_length = response.headers.get("Content-Length")
                if content_length:
                    try:
                        if int(content_length) > self.max_response_bytes:
                            raise OversizedResponseError("Response too large")
                    except ValueError:
                        pass

                content = bytearray()
                async for chunk in response.aiter_bytes():
                    content.extend(chunk)
                    if len(content) > self.max_response_bytes:
                        raise OversizedResponseError("Response too large")

                return TransportResponse(
                    status_code=response.status_code,
                    content=bytes(content),
                    headers={name.lower(): value for name, value in response.headers.items()},
                )
        except httpx.HTTPError as e:
            logger.debug(f"HTTP transport failure for {method} {url}: {e!r}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()
