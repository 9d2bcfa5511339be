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
from unittest.mock import AsyncMock, Mock

import pytest
from helpers import MOCK_ACCESS_TOKEN, make_response

from pandago.client import PandagoClientAsync
from pandago.config import PandagoConfig
from pandago.models import Token
from pandago.resources import OrderResource, OutletResource


@pytest.fixture
def requester() -> Mock:
    return Mock()


class TestOrderResource:
    def test_create(self, requester: Mock) -> None:
        payload = {"sender": {"name": "Shop"}, "amount": 23.5}
        OrderResource(requester).create(payload)
        requester.request.assert_called_once_with("POST", "/orders", json=payload)

    def test_get(self, requester: Mock) -> None:
        OrderResource(requester).get("o-1")
        requester.request.assert_called_once_with("GET", "/orders/o-1")

    def test_update(self, requester: Mock) -> None:
        OrderResource(requester).update("o-1", {"amount": 10})
        requester.request.assert_called_once_with("PUT", "/orders/o-1", json={"amount": 10})

    def test_cancel(self, requester: Mock) -> None:
        OrderResource(requester).cancel("o-1", {"reason": "MISTAKE_ERROR"})
        requester.request.assert_called_once_with("DELETE", "/orders/o-1", json={"reason": "MISTAKE_ERROR"})

    def test_coordinates(self, requester: Mock) -> None:
        OrderResource(requester).get_coordinates("o-1")
        requester.request.assert_called_once_with("GET", "/orders/o-1/coordinates")

    @pytest.mark.parametrize("kind", ["delivery", "pickup", "return"])
    def test_proofs(self, requester: Mock, kind: str) -> None:
        getattr(OrderResource(requester), f"get_proof_of_{kind}")("o-1")
        requester.request_document.assert_called_once_with("GET", f"/orders/proof_of_{kind}/o-1")
        requester.request.assert_not_called()

    def test_estimates(self, requester: Mock) -> None:
        orders = OrderResource(requester)
        orders.estimate_fee({"amount": 1})
        orders.estimate_time({"amount": 1})
        assert [call.args for call in requester.request.call_args_list] == [
            ("POST", "/orders/fee"),
            ("POST", "/orders/time"),
        ]

    def test_identifier_is_escaped(self, requester: Mock) -> None:
        OrderResource(requester).get("a/b c")
        requester.request.assert_called_once_with("GET", "/orders/a%2Fb%20c")

    @pytest.mark.parametrize("order_id", ["", "   "])
    def test_empty_identifier_rejected(self, requester: Mock, order_id: str) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            OrderResource(requester).get(order_id)
        requester.request.assert_not_called()

    def test_returns_client_result(self, requester: Mock) -> None:
        requester.request.return_value = {"order_id": "o-1"}
        assert OrderResource(requester).get("o-1") == {"order_id": "o-1"}


class TestOutletResource:
    def test_get(self, requester: Mock) -> None:
        OutletResource(requester).get("vendor-1")
        requester.request.assert_called_once_with("GET", "/outlets/vendor-1")

    def test_create_or_update(self, requester: Mock) -> None:
        payload = {"name": "Outlet", "latitude": 3.1, "longitude": 101.6}
        OutletResource(requester).create_or_update("vendor-1", payload)
        requester.request.assert_called_once_with("PUT", "/outlets/vendor-1", json=payload)

    def test_list(self, requester: Mock) -> None:
        OutletResource(requester).list()
        requester.request.assert_called_once_with("GET", "/outletList")


@pytest.mark.asyncio
async def test_async_client_resources_are_awaitable(config: PandagoConfig, mock_transport: AsyncMock) -> None:
    client = PandagoClientAsync(config, transport=mock_transport)
    client.token_manager._token = Token(access_token=MOCK_ACCESS_TOKEN, expires_at=time.time() + 3600)
    mock_transport.send.return_value = make_response(200, {"estimated_delivery_fee": 7.5})

    result = await client.orders.estimate_fee({"amount": 20})

    assert result == {"estimated_delivery_fee": 7.5}
    args, kwargs = mock_transport.send.call_args
    assert args == ("POST", "/orders/fee")
    assert kwargs["json"] == {"amount": 20}
