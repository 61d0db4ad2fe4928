"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
import httpx
from contextlib import closing
from typing import AsyncGenerator, Iterator

from fastapi import FastAPI
from fastapi.testclient import TestClient

from kvhttp.store.concurrent import ConcurrentStore
from kvhttp.store.reporter import StatusReporter
from kvhttp.network.http_server import KVHTTPServer, create_app


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store() -> ConcurrentStore:
    """Create a fresh, empty ConcurrentStore."""
    return ConcurrentStore()


@pytest.fixture
def reporter(store: ConcurrentStore) -> StatusReporter:
    """Create a StatusReporter with a short interval for timing tests."""
    return StatusReporter(store, interval=0.05)


# ============================================================================
# App Fixtures
# ============================================================================

@pytest.fixture
def app(store: ConcurrentStore) -> FastAPI:
    """Create the FastAPI app around the test's store."""
    return create_app(store, StatusReporter(store, interval=60))


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """In-process client; entering it runs the app's lifespan."""
    with TestClient(app) as c:
        yield c


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[KVHTTPServer, None]:
    """
    Create and start a live server instance for testing.

    This fixture:
    1. Creates a KVHTTPServer on a random free port
    2. Starts it in a background task
    3. Yields the server once uvicorn has finished startup
    4. Cleans up after the test
    """
    srv = KVHTTPServer(host='127.0.0.1', port=server_port, report_interval=0.1)

    # Start server in background task
    server_task = asyncio.create_task(srv.start())
    await srv.wait_started()

    yield srv

    # Cleanup
    await srv.stop()
    try:
        await asyncio.wait_for(server_task, timeout=5)
    except asyncio.TimeoutError:
        server_task.cancel()


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest.fixture
def http_client_factory(server_port: int):
    """
    Factory fixture to create HTTP clients for the live server.

    Usage:
        async def test_something(server, http_client_factory):
            async with http_client_factory() as client:
                response = await client.get("/data")
    """
    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=f"http://127.0.0.1:{server_port}")
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# Configure asyncio mode for pytest-asyncio
pytest_plugins = ['pytest_asyncio']
