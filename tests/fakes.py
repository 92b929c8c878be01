"""Test doubles shared across the unit tests."""

from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from crowdfund_toolkit.ledger.client import LedgerClient, TransactionHandle
from crowdfund_toolkit.shared.exceptions import TransactionError

GATEWAYS = (
    "https://gw1.test/ipfs/",
    "https://gw2.test/ipfs/",
    "https://gw3.test/ipfs/",
)
CANONICAL_GATEWAY = "https://canonical.test/ipfs/"

FUTURE_DEADLINE = 4102444800  # 2100-01-01T00:00:00Z
OWNER = "0x52f541764E6e90eeBc5c21Ff570De0e2D63766B6"


def make_raw_campaign(
    metadata_hash: str = "bafymeta",
    target: int = 1000,
    amount_collected: int = 250,
    deadline: int = FUTURE_DEADLINE,
    claimed: bool = False,
    is_active: bool = True,
    owner: str = OWNER,
) -> tuple:
    """Campaign struct tuple in contract field order."""
    return (
        owner,
        metadata_hash,
        target,
        deadline,
        amount_collected,
        claimed,
        is_active,
    )


class GatewayRouter:
    """
    httpx.MockTransport handler serving canned gateway responses.

    Routes map a full URL to (status, body) or to the string
    "connect_error". Unknown URLs answer 404. Every requested URL is
    recorded in ``requests`` in order.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes or {}
        self.requests: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)

        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404)
        if route == "connect_error":
            raise httpx.ConnectError("connection refused", request=request)

        status, body = route
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=body)


class FakeTransactionHandle(TransactionHandle):
    """Handle whose confirmation succeeds, fails, or runs a hook first."""

    def __init__(
        self,
        tx_hash: str = "0x" + "ab" * 32,
        error: Optional[Exception] = None,
        on_wait: Optional[Callable[[], Any]] = None,
    ):
        self.tx_hash = tx_hash
        self.error = error
        self.on_wait = on_wait
        self.waited = False

    async def wait(self) -> Dict[str, Any]:
        self.waited = True
        if self.on_wait is not None:
            result = self.on_wait()
            if hasattr(result, "__await__"):
                await result
        if self.error is not None:
            raise self.error
        return {"status": 1, "transactionHash": self.tx_hash}


class FakeLedgerClient(LedgerClient):
    """In-memory ledger recording every submitted transaction."""

    def __init__(
        self,
        entries: Sequence[Any] = (),
        handle: Optional[TransactionHandle] = None,
        read_error: Optional[Exception] = None,
        submit_error: Optional[Exception] = None,
    ):
        self.entries = list(entries)
        self.handle = handle or FakeTransactionHandle()
        self.read_error = read_error
        self.submit_error = submit_error
        self.reads = 0
        self.donations: List[tuple] = []
        self.deletions: List[int] = []

    async def get_active_campaigns(self) -> List[Any]:
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        return list(self.entries)

    async def donate_to_campaign(
        self, campaign_id: int, value: int
    ) -> TransactionHandle:
        if self.submit_error is not None:
            raise self.submit_error
        self.donations.append((campaign_id, value))
        return self.handle

    async def delete_campaign(self, campaign_id: int) -> TransactionHandle:
        if self.submit_error is not None:
            raise self.submit_error
        self.deletions.append(campaign_id)
        return self.handle


def provider_for(client: Optional[LedgerClient]):
    """Async client provider returning ``client``."""

    async def provider():
        return client

    return provider


