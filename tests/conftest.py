"""Shared test fixtures for jsonrpc-dispatch test suite."""

from __future__ import annotations

import os

# Configure Django settings before any Django imports
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tests.settings")

import django

django.setup()

import pytest

from jsonrpc_dispatch.config import reset_config
from jsonrpc_dispatch.dispatcher import Dispatcher
from jsonrpc_dispatch.registry import ProcedureRegistry
from tests.fixtures.handlers import (
    MathService,
    RandomService,
    addition,
    fail,
    refuse,
    whoami,
)


@pytest.fixture(autouse=True)
def _reset_config():
    """Reload configuration from settings for every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def registry():
    """Registry with a representative set of procedures."""
    registry = ProcedureRegistry()
    registry.register("addition", addition)
    registry.register("ping", lambda: "pong")
    registry.register("update", lambda value: None)
    registry.register("fail", fail)
    registry.register("refuse", refuse)
    registry.register("whoami", whoami)
    registry.register("lookup", lambda key: {"error": {"message": f"no {key}"}})
    registry.register("get_data", lambda: {"data": [1, 2, 3]})
    registry.bind("random", RandomService, "between")
    registry.attach(MathService())
    return registry


@pytest.fixture
def dispatcher(registry):
    """Synchronous dispatcher over the test registry."""
    return Dispatcher(registry)


@pytest.fixture(params=["1.0", "3.0", "2", 2, 2.0, None, ""])
def invalid_jsonrpc_version(request):
    """Parametrized fixture for invalid JSON-RPC versions."""
    return request.param


@pytest.fixture(params=[123, 45.6, [], {}, None, True, ""])
def invalid_method_type(request):
    """Parametrized fixture for invalid method values."""
    return request.param


@pytest.fixture(params=["string", 123, 45.6, True])
def invalid_params_type(request):
    """Parametrized fixture for invalid parameter types."""
    return request.param
