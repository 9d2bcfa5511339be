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
ErrorHandler component for turning heterogeneous API error payloads into readable diagnostics.

The pandago API and its token service answer errors in several shapes
(`{"message": ...}`, `{"error": ..., "error_description": ...}`, `{"errors": [...]}` with
strings or objects). Everything goes through one extraction path here, and static
remediation guidance is layered on top by message pattern and by status code.
"""

from collections.abc import Mapping
from typing import Any, NamedTuple

from pandago.exceptions import RequestError


class Suggestion(NamedTuple):
    summary: str
    action: str


STATUS_REASONS: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    429: "Rate Limit Exceeded",
    500: "Internal Server Error",
    503: "Service Unavailable",
}

STATUS_SUGGESTIONS: dict[int, Suggestion] = {
    400: Suggestion("Invalid request.", "Check your request parameters and format."),
    401: Suggestion(
        "Authentication failed. Your authentication token may have expired or is invalid.",
        "Try refreshing the token or check your credentials.",
    ),
    403: Suggestion(
        "Access forbidden.",
        "Verify that your account has permission to access this resource and that your scopes cover it.",
    ),
    404: Suggestion("Resource not found.", "Verify the ID or path is correct."),
    405: Suggestion("Method not allowed.", "Check if the requested operation is supported for this resource."),
    409: Suggestion(
        "Conflict with current state of the resource.",
        "The resource may be in a state that doesn't allow this operation.",
    ),
    422: Suggestion("Unprocessable entity.", "The request data is likely invalid. Check your parameters."),
    429: Suggestion(
        "Too many requests.",
        "You've exceeded the rate limit. Please reduce the frequency of your requests.",
    ),
    500: Suggestion(
        "Internal server error.",
        "The pandago API encountered an error. Please try again later or contact support.",
    ),
    502: Suggestion("Bad gateway.", "The pandago API is experiencing issues. Please try again later."),
    503: Suggestion("Service unavailable.", "The pandago API is temporarily unavailable. Please try again later."),
    504: Suggestion("Gateway timeout.", "The pandago API request timed out. Please try again later."),
}

SERVER_ERROR_SUGGESTION = Suggestion(
    "Server error.",
    "The pandago API is experiencing issues. Please try again later or contact support.",
)

# Order matters: the first matching pattern wins.
MESSAGE_PATTERN_TIPS: tuple[tuple[str, str], ...] = (
    (
        "outlet not found",
        "Verify that the client vendor ID exists and that you have permission to access it.",
    ),
    (
        "no branch found",
        "Check the sender coordinates. They may be too far from any registered branch.",
    ),
    (
        "order is not cancellable",
        "The order has progressed too far in the delivery process to be cancelled.",
    ),
    (
        "order update is not allowed",
        "Order updates may not be allowed in the current country or for the current order status.",
    ),
    (
        "access token is expired",
        "Your authentication token has expired. Request a new token.",
    ),
    (
        "invalid credentials",
        "Your authentication credentials are invalid. Check your client ID, key ID, and private key.",
    ),
    (
        "already exists",
        "A resource with this identifier already exists. Use a different identifier or update the existing resource.",
    ),
    (
        "validation failed",
        "The request data failed validation. Check the format and values of your request parameters.",
    ),
)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"
MULTIPLE_ERRORS_MESSAGE = "Multiple errors occurred"


def _entry_message(entry: Any) -> str | None:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Mapping) and entry.get("message") is not None:
        return str(entry["message"])
    return None


class ErrorHandler:
    """
    Extracts messages from error payloads and renders detailed diagnostics for `RequestError`.
    """

    @staticmethod
    def extract_message(response_data: Mapping[str, Any]) -> str:
        """
        Picks the most descriptive message out of an error payload.

        Tries `message`, `error_description`, `error` and then the first entry of `errors`.

        Args:
            response_data: The decoded error payload.

        Returns:
            str: The extracted message, or a generic fallback.
        """
        for key in ("message", "error_description", "error"):
            value = response_data.get(key)
            if value is not None:
                return str(value)

        errors = response_data.get("errors")
        if isinstance(errors, list) and errors:
            first = _entry_message(errors[0])
            return first if first is not None else MULTIPLE_ERRORS_MESSAGE

        return UNKNOWN_ERROR_MESSAGE

    @staticmethod
    def parse_error_message(response_data: Mapping[str, Any], status_code: int) -> str:
        """
        Extracts the error message and appends the reason phrase for well-known status codes.

        Args:
            response_data: The decoded error payload.
            status_code: The HTTP status code.

        Returns:
            str: e.g. "Order not found (Not Found)".
        """
        message = ErrorHandler.extract_message(response_data)
        reason = STATUS_REASONS.get(status_code)
        if reason:
            return f"{message} ({reason})"
        return message

    @staticmethod
    def suggestion_for_status(status_code: int) -> Suggestion | None:
        suggestion = STATUS_SUGGESTIONS.get(status_code)
        if suggestion is None and 500 <= status_code < 600:
            return SERVER_ERROR_SUGGESTION
        return suggestion

    @staticmethod
    def tip_for_message(message: str) -> str | None:
        """
        Returns the tip of the first pattern found in `message`, case-insensitively.
        """
        lowered = message.lower()
        for pattern, tip in MESSAGE_PATTERN_TIPS:
            if pattern in lowered:
                return tip
        return None

    @staticmethod
    def get_detailed_error_message(error: RequestError) -> str:
        """
        Builds a multi-line diagnostic for a failed request.

        Lines, in order: the status code and message, the request line, the status-code
        suggestion, the tip of the first matching message pattern, and the errors
        reported by the API.

        Args:
            error: The request error to describe.

        Returns:
            str: The newline-joined diagnostic.
        """
        message = error.message
        details = [f"Error {error.status_code}: {message}"]

        if error.method and error.endpoint:
            details.append(f"Request: {error.method} {error.endpoint}")

        suggestion = ErrorHandler.suggestion_for_status(error.status_code)
        if suggestion is not None:
            details.append(f"Suggestion: {suggestion.summary} {suggestion.action}")

        tip = ErrorHandler.tip_for_message(message)
        if tip is not None:
            details.append(f"Tip: {tip}")

        data = error.data
        errors = data.get("errors")
        if isinstance(errors, list):
            details.append("API reported errors:")
            for entry in errors:
                entry_message = _entry_message(entry)
                if entry_message is not None:
                    details.append(f"- {entry_message}")
        elif data.get("error_description"):
            details.append(f"API message: {data['error_description']}")

        return "\n".join(details)
