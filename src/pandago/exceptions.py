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
Custom exceptions for the pandago package.

Every error raised by the SDK derives from `PandagoError`. Callers can branch on the
concrete class (`ConfigurationError`, `AuthenticationError`, `RequestError`,
`UnexpectedFormatError`, `TransportError`) and read the terse `message` without parsing
the multi-line `friendly_message` rendering.
"""

from typing import Any

_SERVER_ISSUES = "The pandago API is experiencing issues. Please try again later or contact support."

FRIENDLY_SUGGESTIONS: dict[int, str] = {
    401: "Your authentication token may have expired or is invalid. Try refreshing the token.",
    403: "You don't have permission to access this resource. Check your credentials and scopes.",
    404: "The requested resource was not found. Check if the ID or path is correct.",
    409: "There's a conflict with the current state of the resource.",
    422: "The request data is invalid. Check your request parameters and format.",
    429: "You've exceeded the rate limit. Please reduce the frequency of your requests.",
    500: _SERVER_ISSUES,
    502: _SERVER_ISSUES,
    503: _SERVER_ISSUES,
    504: _SERVER_ISSUES,
}

ORDER_NOT_CANCELLABLE = "order is not cancellable"
NOT_CANCELLABLE_SUGGESTION = "The order may have progressed too far in the delivery process to be cancelled."


class PandagoError(Exception):
    """Base exception for all pandago errors."""

    @property
    def message(self) -> str:
        """The terse, single-line error message."""
        return str(self)

    @property
    def cause(self) -> BaseException | None:
        """The exception this error was raised from, if any."""
        return self.__cause__

    @property
    def friendly_message(self) -> str:
        """A human-oriented rendering of the error. Defaults to the terse message."""
        return self.message


class ConfigurationError(PandagoError):
    """Raised when required settings are missing or invalid at construction time."""


class AuthenticationError(PandagoError):
    """
    Raised when a bearer token cannot be obtained.

    Covers assertion signing failures, non-200 answers from the token endpoint,
    malformed token responses and transport failures during the exchange.
    """

    @property
    def friendly_message(self) -> str:
        return (
            f"{self.message}\n"
            "Suggestion: Check your client ID, key ID, private key and scope, "
            "and that the key is registered for the selected environment."
        )


class UnexpectedFormatError(PandagoError):
    """Raised when a successful response body does not match any recognized shape."""


class TransportError(PandagoError):
    """Raised by the HTTP transport when a request cannot be completed."""


class OversizedResponseError(TransportError):
    """Raised when an HTTP response is too large."""


class RequestError(PandagoError):
    """
    Raised when an API call fails, either with a non-2xx response or before any response arrived.

    Attributes:
        status_code (int): The HTTP status code, 0 when no response was received.
        raw_message (str): The message before request context was prepended.
        data (dict[str, Any]): The decoded error payload returned by the API.
        method (str | None): The HTTP method of the failed request.
        endpoint (str | None): The endpoint path of the failed request.
        request_options (dict[str, Any]): The (sanitized) options the request was sent with.
    """

    def __init__(
        self,
        message: str = "",
        status_code: int = 0,
        cause: BaseException | None = None,
        data: dict[str, Any] | None = None,
        method: str | None = None,
        endpoint: str | None = None,
        request_options: dict[str, Any] | None = None,
    ) -> None:
        self._raw_message = message
        if method and endpoint:
            message = f"[{method} {endpoint}] {message}"

        super().__init__(message)

        self._status_code = status_code
        self._data = dict(data or {})
        self._method = method
        self._endpoint = endpoint
        self._request_options = dict(request_options or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def raw_message(self) -> str:
        return self._raw_message

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    @property
    def method(self) -> str | None:
        return self._method

    @property
    def endpoint(self) -> str | None:
        return self._endpoint

    @property
    def request_options(self) -> dict[str, Any]:
        return dict(self._request_options)

    @property
    def friendly_message(self) -> str:
        """
        The message followed by one status-specific suggestion line, when the status has one.

        For the full diagnostic, see `ErrorHandler.get_detailed_error_message`.
        """
        message = self.message
        if self._status_code == 409 and ORDER_NOT_CANCELLABLE in message.lower():
            return f"{message}\nSuggestion: {NOT_CANCELLABLE_SUGGESTION}"

        suggestion = FRIENDLY_SUGGESTIONS.get(self._status_code)
        if suggestion is None:
            return message
        return f"{message}\nSuggestion: {suggestion}"
