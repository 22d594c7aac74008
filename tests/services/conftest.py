"""Service test fixtures — handlers wired to scripted fakes."""

import pytest

from codemode.services.handle_execution import ExecutionHandlers
from tests.services.fakes import (
    INSTALLED_RUNTIME,
    MISSING_RUNTIME,
    PROXY_BASE,
    FakeExecutor,
    ProbeCounter,
)


@pytest.fixture
def installed_probe():
    return ProbeCounter(INSTALLED_RUNTIME)


@pytest.fixture
def missing_probe():
    return ProbeCounter(MISSING_RUNTIME)


@pytest.fixture
def make_handlers():
    def _make(executor: FakeExecutor, timeout_ms: int = 30_000):
        return ExecutionHandlers(
            executor=executor, proxy_base=PROXY_BASE, timeout_ms=timeout_ms,
        )
    return _make
