"""Shared fixtures for the ctxrouter test suite."""

import pytest

from ctxrouter.config import RouterConfig
from ctxrouter.router import CtxRouter


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def router() -> CtxRouter:
    """A router without process telemetry so tests never touch psutil."""
    return CtxRouter(RouterConfig(service_name="test-service", stats_enabled=False))
