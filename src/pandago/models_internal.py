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
Internal data models for the pandago package.
These are not exposed in the public API.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransportResponse(BaseModel):
    """
    A fully read HTTP response as returned by a `Transport`.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="The HTTP status code.")
    content: bytes = Field(default=b"", description="The raw response body.")
    headers: dict[str, str] = Field(default_factory=dict, description="Response headers, lower-cased names.")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def decode_json(self) -> Any:
        """
        Decodes the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.content)
