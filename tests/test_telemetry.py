# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/pandago_sdk

import time
from unittest.mock import AsyncMock, Mock, patch

import pytest
from helpers import MOCK_ACCESS_TOKEN, make_response, token_response
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode, Tracer

from pandago.assertion import AssertionSigner
from pandago.client import PandagoClientAsync
from pandago.config import PandagoConfig
from pandago.exceptions import AuthenticationError, RequestError, TransportError
from pandago.models import Token
from pandago.token_manager import TokenManager


@pytest.fixture
def telemetry_setup() -> tuple[InMemorySpanExporter, Tracer]:
    """Sets up an OpenTelemetry tracer with an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    tracer = provider.get_tracer("test_tracer")
    return exporter, tracer


@pytest.fixture
def mock_signer() -> Mock:
    signer = Mock(spec=AssertionSigner)
    signer.sign.return_value = "signed.assertion.jwt"
    return signer


@pytest.fixture
def client(config: PandagoConfig, mock_transport: AsyncMock) -> PandagoClientAsync:
    client = PandagoClientAsync(config, transport=mock_transport)
    client.token_manager._token = Token(access_token=MOCK_ACCESS_TOKEN, expires_at=time.time() + 3600)
    return client


@pytest.mark.asyncio
async def test_token_refresh_success_span(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer],
    config: PandagoConfig,
    mock_transport: AsyncMock,
    mock_signer: Mock,
) -> None:
    exporter, tracer = telemetry_setup
    mock_transport.send.return_value = token_response()

    with patch("pandago.token_manager.tracer", tracer):
        manager = TokenManager(config, mock_transport, signer=mock_signer)
        await manager.get_token()
        # Cache hit: no second span
        await manager.get_token()

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    assert spans[0].name == "pandago.token.refresh"
    assert spans[0].status.status_code == StatusCode.OK


@pytest.mark.asyncio
async def test_token_refresh_failure_span(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer],
    config: PandagoConfig,
    mock_transport: AsyncMock,
    mock_signer: Mock,
) -> None:
    exporter, tracer = telemetry_setup
    mock_transport.send.side_effect = TransportError("ConnectTimeout: timed out")

    with patch("pandago.token_manager.tracer", tracer):
        manager = TokenManager(config, mock_transport, signer=mock_signer)
        with pytest.raises(AuthenticationError):
            await manager.get_token()

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    span = spans[0]
    assert span.status.status_code == StatusCode.ERROR
    assert any(event.name == "exception" for event in span.events)


@pytest.mark.asyncio
async def test_request_span_attributes(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer],
    client: PandagoClientAsync,
    mock_transport: AsyncMock,
) -> None:
    exporter, tracer = telemetry_setup
    mock_transport.send.return_value = make_response(200, {"order_id": "o-1"})

    with patch("pandago.client.tracer", tracer):
        await client.request("get", "/orders/o-1")

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    span = spans[0]
    assert span.name == "pandago.request"
    assert span.attributes is not None
    assert span.attributes["http.request.method"] == "GET"
    assert span.attributes["pandago.endpoint"] == "/orders/o-1"
    assert span.attributes["http.response.status_code"] == 200
    assert span.status.status_code != StatusCode.ERROR


@pytest.mark.asyncio
async def test_request_span_marks_error_status(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer],
    client: PandagoClientAsync,
    mock_transport: AsyncMock,
) -> None:
    exporter, tracer = telemetry_setup
    mock_transport.send.return_value = make_response(422, {"message": "Invalid payload"})

    with patch("pandago.client.tracer", tracer):
        with pytest.raises(RequestError):
            await client.request("POST", "/orders", json={})

    span = exporter.get_finished_spans()[0]
    assert span.status.status_code == StatusCode.ERROR
    assert span.attributes is not None
    assert span.attributes["http.response.status_code"] == 422


@pytest.mark.asyncio
async def test_request_span_records_transport_failure(
    telemetry_setup: tuple[InMemorySpanExporter, Tracer],
    client: PandagoClientAsync,
    mock_transport: AsyncMock,
) -> None:
    exporter, tracer = telemetry_setup
    mock_transport.send.side_effect = TransportError("ConnectError: refused")

    with patch("pandago.client.tracer", tracer):
        with pytest.raises(RequestError):
            await client.request("GET", "/outletList")

    span = exporter.get_finished_spans()[0]
    assert span.status.status_code == StatusCode.ERROR
    assert any(event.name == "exception" for event in span.events)
    assert span.attributes is not None
    assert "http.response.status_code" not in span.attributes
