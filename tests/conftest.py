"""
Pytest configuration and fixtures for pokerledger tests.

Provides shared balance builders and an async HTTP client wired to the
FastAPI app.
"""

import pytest
import pytest_asyncio

from pokerledger.models.balance import PlayerBalance


@pytest.fixture
def make_balances():
    """Build PlayerBalance lists from ``(id, net)`` pairs.

    The display name is the id; tests only compare ids.
    """
    def _make(*pairs: tuple[str, int]) -> list[PlayerBalance]:
        return [PlayerBalance(id=pid, name=pid, net=net) for pid, net in pairs]
    return _make


@pytest_asyncio.fixture
async def client():
    """Async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient: HTTPX async client with the FastAPI app.
    """
    from httpx import ASGITransport, AsyncClient
    from pokerledger.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
