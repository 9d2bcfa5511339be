# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from authlib.jose import JsonWebKey
from helpers import MOCK_CLIENT_ID, MOCK_KEY_ID, MOCK_SCOPE

from pandago.config import PandagoConfig
from pandago.transport import HttpxTransport


@pytest.fixture(autouse=True)
def clean_pandago_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Removes PANDAGO_* settings from the environment so that pydantic-settings
    only sees the values a test passes explicitly.
    """
    for name in list(os.environ):
        upper = name.upper()
        if upper.startswith("PANDAGO_") and upper not in ("PANDAGO_LOG_LEVEL", "PANDAGO_LOG_JSON"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(scope="session")
def rsa_key() -> Any:
    return JsonWebKey.generate_key("RSA", 2048, is_private=True)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key: Any) -> str:
    return rsa_key.as_pem(is_private=True).decode("utf-8")  # type: ignore[no-any-return]


@pytest.fixture(scope="session")
def public_jwk(rsa_key: Any) -> dict[str, Any]:
    return rsa_key.as_dict(is_private=False)  # type: ignore[no-any-return]


@pytest.fixture
def config(private_key_pem: str) -> PandagoConfig:
    return PandagoConfig(
        client_id=MOCK_CLIENT_ID,
        key_id=MOCK_KEY_ID,
        scope=MOCK_SCOPE,
        private_key=private_key_pem,
        country="my",
        environment="sandbox",
        timeout=5,
    )


@pytest.fixture
def mock_transport() -> AsyncMock:
    transport = AsyncMock(spec=HttpxTransport)
    transport.send = AsyncMock()
    transport.aclose = AsyncMock()
    return transport
