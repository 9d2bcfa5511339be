import asyncio
import contextlib
import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from anyio import create_task_group

from pandago import PandagoClientAsync, PandagoConfig, PandagoError, RequestError


async def main() -> None:
    """
    Demonstrates the async client against the pandago sandbox.
    Includes:
    - Settings loaded from PANDAGO_* environment variables
    - TaskGroup for concurrent calls sharing one token refresh
    - Detailed error rendering for failed requests
    """
    print(">>> Starting pandago order flow example")

    # PANDAGO_CLIENT_ID, PANDAGO_KEY_ID, PANDAGO_SCOPE and PANDAGO_PRIVATE_KEY must be set
    config = PandagoConfig()

    async with PandagoClientAsync(config) as client:
        print(f">>> Client initialized for {config.api_base_url}")

        # Both calls find an empty token cache; only one token request is made
        print(">>> Starting concurrent estimate calls...")
        payload = {
            "sender": {"client_vendor_id": "example-outlet"},
            "recipient": {"location": {"latitude": 3.1390, "longitude": 101.6869}},
            "amount": 25.0,
        }
        try:
            async with create_task_group() as tg:
                tg.start_soon(client.orders.estimate_fee, payload)
                tg.start_soon(client.orders.estimate_time, payload)
        except* RequestError as group:
            for error in group.exceptions:
                print(f">>> Request failed:\n{error.friendly_message}")  # type: ignore[attr-defined]
        except* PandagoError as group:
            for error in group.exceptions:
                print(f">>> Client error: {error}")

        print(">>> Concurrent tasks finished.")


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
