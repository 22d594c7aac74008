"""API test fixtures — httpx client against the proxy app with a real or fake manager.

Invariants:
    - get_connection_manager dependency overridden per test; lifespan never runs
    - services_dir holds a .mcp.json launching the stdio echo service
"""

import json
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from codemode.core.service_config import SERVICES_DOCUMENT_NAME
from codemode.infrastructure.config_resolver import ConfigResolver
from codemode.infrastructure.connection_manager import (
    ConnectionManager,
    get_connection_manager,
)
from codemode.infrastructure.service_connection import service_connector
from codemode.main import app

ECHO_SERVER = Path(__file__).parent.parent / "fixtures" / "echo_server.py"


@pytest.fixture
def services_dir(tmp_path):
    document = {"mcpServers": {
        "echo": {"command": sys.executable, "args": [str(ECHO_SERVER)]},
        "codemode": {"command": "codemode"},
    }}
    (tmp_path / SERVICES_DOCUMENT_NAME).write_text(json.dumps(document))
    return tmp_path


@pytest.fixture
async def manager(services_dir):
    manager = ConnectionManager(
        ConfigResolver([str(services_dir)]),
        service_connector(request_timeout_seconds=10),
    )
    yield manager
    await manager.close_all()


@pytest.fixture
def make_client():
    """Client factory bound to whichever ConnectionManager the test supplies."""
    def _make(manager: ConnectionManager) -> AsyncClient:
        app.dependency_overrides[get_connection_manager] = lambda: manager
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
async def client(manager, make_client):
    async with make_client(manager) as c:
        yield c
