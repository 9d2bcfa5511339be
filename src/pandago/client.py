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
Pandago API clients: the async request pipeline and its synchronous facade.
"""

import json
import threading
from collections.abc import Awaitable, Callable
from contextlib import ExitStack
from functools import partial
from typing import Any, TypeVar

import anyio
from anyio.from_thread import BlockingPortal, start_blocking_portal
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from pandago.assertion import AssertionSigner
from pandago.config import PandagoConfig
from pandago.error_handler import ErrorHandler
from pandago.exceptions import PandagoError, RequestError, TransportError, UnexpectedFormatError
from pandago.models_internal import TransportResponse
from pandago.resources import OrderResource, OutletResource
from pandago.token_manager import TokenManager
from pandago.transport import HttpxTransport, Transport
from pandago.utils.logger import logger

tracer = trace.get_tracer(__name__)

T = TypeVar("T")

REDACTED_BEARER = "Bearer [redacted]"


def redact_options(options: dict[str, Any]) -> dict[str, Any]:
    """
    Returns a copy of request options that is safe to log or attach to an error.

    The Authorization header is replaced, every other option is kept as is.

    Args:
        options: The request options passed to the transport.

    Returns:
        dict[str, Any]: A shallow copy with a redacted header mapping.
    """
    sanitized = dict(options)
    headers = sanitized.get("headers")
    if isinstance(headers, dict):
        headers = dict(headers)
        for name in list(headers):
            if name.lower() == "authorization":
                headers[name] = REDACTED_BEARER
        sanitized["headers"] = headers
    return sanitized


class PandagoClientAsync:
    """
    Async implementation of the pandago client (The Core).
    Handles resources via async context manager.

    Every call obtains a bearer token from the `TokenManager`, dispatches through the
    transport and turns failures into `RequestError` with request context attached.
    """

    def __init__(
        self,
        config: PandagoConfig,
        transport: Transport | None = None,
        signer: AssertionSigner | None = None,
    ) -> None:
        """
        Initialize the PandagoClientAsync.

        Args:
            config: The configuration object.
            transport: External transport (optional). If not provided, an `HttpxTransport`
                bound to the configured API base URL and timeout is created and owned by the client.
            signer: Assertion signer (optional). Defaults to an `AssertionSigner` with a one hour lifetime.
        """
        self.config = config
        self._internal_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(
            base_url=config.api_base_url,
            timeout=config.timeout,
        )
        self.token_manager = TokenManager(config, self.transport, signer=signer)
        self._orders: OrderResource | None = None
        self._outlets: OutletResource | None = None

    async def __aenter__(self) -> "PandagoClientAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._internal_transport:
            await self.transport.aclose()

    @property
    def orders(self) -> OrderResource:
        if self._orders is None:
            self._orders = OrderResource(self)
        return self._orders

    @property
    def outlets(self) -> OutletResource:
        if self._outlets is None:
            self._outlets = OutletResource(self)
        return self._outlets

    async def request(self, method: str, path: str, **options: Any) -> Any:
        """
        Makes an authenticated request to the API and returns the decoded JSON body.

        Args:
            method: The HTTP method.
            path: The endpoint path relative to the API base URL (e.g. /orders).
            **options: Transport options (`json`, `params`, `headers`, `data`).

        Returns:
            Any: The decoded JSON body, or an empty dict for 204 No Content.

        Raises:
            AuthenticationError: If no bearer token could be obtained.
            RequestError: If the transport fails or the API answers with a non-2xx status.
            UnexpectedFormatError: If a successful response is not valid JSON.
        """
        response = await self._send(method, path, options)

        if response.status_code == 204:
            return {}

        try:
            return response.decode_json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise UnexpectedFormatError(f"Invalid JSON response from API: {e}") from e

    async def request_document(self, method: str, path: str, **options: Any) -> str:
        """
        Makes an authenticated request for an opaque document such as a proof-of-delivery image.

        The API returns either the base64 string itself or a `{"data": "<base64>"}` envelope.

        Returns:
            str: The document payload.

        Raises:
            UnexpectedFormatError: If the body is neither a string nor a `data` envelope.
        """
        response = await self._send(method, path, options)

        try:
            body = response.decode_json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            # Not JSON at all: the body is the raw document
            text = response.text
            if text:
                return text
            raise UnexpectedFormatError(f"Empty document response from {path}") from None

        if isinstance(body, str):
            return body
        if isinstance(body, dict) and isinstance(body.get("data"), str):
            return body["data"]  # type: ignore[no-any-return]

        raise UnexpectedFormatError(
            f"Unexpected document format from {path}: expected a string or a 'data' envelope, "
            f"got {type(body).__name__}"
        )

    async def _send(self, method: str, path: str, options: dict[str, Any]) -> TransportResponse:
        method = method.upper()
        token = await self.token_manager.get_token()

        options = dict(options)
        options["headers"] = {
            **(options.get("headers") or {}),
            "Authorization": f"Bearer {token.bearer}",
            "Accept": "application/json",
        }
        sanitized = redact_options(options)

        logger.debug(f"Making API request: {method} {path} options={sanitized}")

        with tracer.start_as_current_span("pandago.request") as span:
            span.set_attribute("http.request.method", method)
            span.set_attribute("pandago.endpoint", path)
            try:
                response = await self.transport.send(method, path, **options)
            except Exception as e:
                if isinstance(e, PandagoError) and not isinstance(e, TransportError):
                    raise
                logger.error(f"API request failed: {method} {path} - {type(e).__name__}: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise RequestError(
                    f"API request failed: {method} {path} - {e}",
                    0,
                    e,
                    {},
                    method,
                    path,
                    sanitized,
                ) from e

            span.set_attribute("http.response.status_code", response.status_code)
            logger.debug(f"API response received: {response.status_code} ({len(response.content)} bytes)")

            if not response.is_success:
                error = self._build_request_error(response, method, path, sanitized)
                span.set_status(Status(StatusCode.ERROR, error.message))
                raise error

            return response

    def _build_request_error(
        self,
        response: TransportResponse,
        method: str,
        path: str,
        sanitized: dict[str, Any],
    ) -> RequestError:
        try:
            data = response.decode_json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = ErrorHandler.parse_error_message(data, status_code)

        if status_code >= 500:
            message += f" (Environment: {self.config.environment}, Country: {self.config.country})"

        if status_code == 401:
            # The token was rejected upstream; do not keep serving it from the cache
            self.token_manager.invalidate()

        return RequestError(message, status_code, None, data, method, path, sanitized)


class PandagoClient:
    """
    Synchronous facade over `PandagoClientAsync`.

    Calls are run on an anyio blocking portal started on first use, so the async client,
    its transport and the token cache all live on a single event loop no matter how many
    threads use the facade.
    """

    def __init__(
        self,
        config: PandagoConfig,
        transport: Transport | None = None,
        signer: AssertionSigner | None = None,
    ) -> None:
        self._async = PandagoClientAsync(config, transport=transport, signer=signer)
        self._stack = ExitStack()
        self._portal: BlockingPortal | None = None
        self._portal_lock = threading.Lock()
        self._orders: OrderResource | None = None
        self._outlets: OutletResource | None = None

    def __enter__(self) -> "PandagoClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def config(self) -> PandagoConfig:
        return self._async.config

    @property
    def token_manager(self) -> TokenManager:
        return self._async.token_manager

    @property
    def orders(self) -> OrderResource:
        if self._orders is None:
            self._orders = OrderResource(self)
        return self._orders

    @property
    def outlets(self) -> OutletResource:
        if self._outlets is None:
            self._outlets = OutletResource(self)
        return self._outlets

    def _run(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        with self._portal_lock:
            if self._portal is None:
                self._portal = self._stack.enter_context(start_blocking_portal())
            portal = self._portal
        return portal.call(partial(func, *args, **kwargs))

    def request(self, method: str, path: str, **options: Any) -> Any:
        """Synchronous `PandagoClientAsync.request`."""
        return self._run(self._async.request, method, path, **options)

    def request_document(self, method: str, path: str, **options: Any) -> str:
        """Synchronous `PandagoClientAsync.request_document`."""
        return self._run(self._async.request_document, method, path, **options)

    def get_token(self) -> str:
        """Returns the current bearer token string, refreshing it if needed."""
        token = self._run(self._async.token_manager.get_token)
        return token.bearer

    def close(self) -> None:
        """Closes the async client and stops the portal thread."""
        with self._portal_lock:
            portal = self._portal
            self._portal = None
        try:
            if portal is not None:
                portal.call(self._async.aclose)
            else:
                anyio.run(self._async.aclose)
        finally:
            self._stack.close()
