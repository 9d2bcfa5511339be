# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

"""Shared test data and response builders."""

import json
from typing import Any

from pandago.models_internal import TransportResponse

MOCK_CLIENT_ID = "pandago:my:00000000-0000-0000-0000-000000000000"
MOCK_KEY_ID = "00000000-0000-0000-0000-000000000001"
MOCK_SCOPE = "pandago.api.my.*"
MOCK_ACCESS_TOKEN = "access-token-123"


def make_response(status_code: int, body: Any = None, raw: bytes | None = None) -> TransportResponse:
    """Builds a TransportResponse from a JSON-serializable body or raw bytes."""
    if raw is None:
        raw = b"" if body is None else json.dumps(body).encode("utf-8")
    return TransportResponse(status_code=status_code, content=raw, headers={"content-type": "application/json"})


def token_response(access_token: str = MOCK_ACCESS_TOKEN, expires_in: int = 3600) -> TransportResponse:
    return make_response(200, {"access_token": access_token, "expires_in": expires_in, "token_type": "Bearer"})
