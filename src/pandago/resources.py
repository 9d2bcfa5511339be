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
Thin resource wrappers for the order and outlet endpoints.

Each method builds the endpoint path and hands off to the client's `request` or
`request_document`. With `PandagoClientAsync` the methods return awaitables, with the
synchronous `PandagoClient` they return the decoded result directly.
"""

from typing import Any, Protocol
from urllib.parse import quote


class Requester(Protocol):
    def request(self, method: str, path: str, **options: Any) -> Any: ...

    def request_document(self, method: str, path: str, **options: Any) -> Any: ...


def _segment(value: str) -> str:
    value = str(value).strip()
    if not value:
        raise ValueError("Resource identifier must not be empty")
    return quote(value, safe="")


class OrderResource:
    """Order endpoints: creation, lookup, updates, cancellation, tracking and proofs."""

    def __init__(self, client: Requester) -> None:
        self.client = client

    def create(self, payload: dict[str, Any]) -> Any:
        return self.client.request("POST", "/orders", json=payload)

    def get(self, order_id: str) -> Any:
        return self.client.request("GET", f"/orders/{_segment(order_id)}")

    def update(self, order_id: str, payload: dict[str, Any]) -> Any:
        return self.client.request("PUT", f"/orders/{_segment(order_id)}", json=payload)

    def cancel(self, order_id: str, payload: dict[str, Any]) -> Any:
        """Cancels an order. `payload` carries the cancellation `reason`."""
        return self.client.request("DELETE", f"/orders/{_segment(order_id)}", json=payload)

    def get_coordinates(self, order_id: str) -> Any:
        """Current courier coordinates for an order."""
        return self.client.request("GET", f"/orders/{_segment(order_id)}/coordinates")

    def get_proof_of_delivery(self, order_id: str) -> Any:
        """Base64 encoded proof-of-delivery image."""
        return self.client.request_document("GET", f"/orders/proof_of_delivery/{_segment(order_id)}")

    def get_proof_of_pickup(self, order_id: str) -> Any:
        """Base64 encoded proof-of-pickup image."""
        return self.client.request_document("GET", f"/orders/proof_of_pickup/{_segment(order_id)}")

    def get_proof_of_return(self, order_id: str) -> Any:
        """Base64 encoded proof-of-return image."""
        return self.client.request_document("GET", f"/orders/proof_of_return/{_segment(order_id)}")

    def estimate_fee(self, payload: dict[str, Any]) -> Any:
        return self.client.request("POST", "/orders/fee", json=payload)

    def estimate_time(self, payload: dict[str, Any]) -> Any:
        return self.client.request("POST", "/orders/time", json=payload)


class OutletResource:
    """Outlet (vendor branch) endpoints."""

    def __init__(self, client: Requester) -> None:
        self.client = client

    def get(self, client_vendor_id: str) -> Any:
        return self.client.request("GET", f"/outlets/{_segment(client_vendor_id)}")

    def create_or_update(self, client_vendor_id: str, payload: dict[str, Any]) -> Any:
        return self.client.request("PUT", f"/outlets/{_segment(client_vendor_id)}", json=payload)

    def list(self) -> Any:
        return self.client.request("GET", "/outletList")
