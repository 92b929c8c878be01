"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

from typing import Any, Dict

import httpx
import pytest

from crowdfund_toolkit.shared.exceptions import TransactionError
from tests.fakes import GATEWAYS, FakeTransactionHandle, GatewayRouter


@pytest.fixture
def gateways() -> tuple:
    return GATEWAYS


@pytest.fixture
def router() -> GatewayRouter:
    return GatewayRouter()


@pytest.fixture
def http_client(router) -> httpx.AsyncClient:
    """AsyncClient whose transport is the shared router."""
    return httpx.AsyncClient(transport=httpx.MockTransport(router))


@pytest.fixture
def sample_metadata() -> Dict[str, Any]:
    return {"title": "T", "description": "D", "image": "ipfs://bafyimg"}


@pytest.fixture
def failing_handle() -> FakeTransactionHandle:
    return FakeTransactionHandle(
        error=TransactionError("Transaction reverted")
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line("markers", "slow: mark test as slow-running")
