"""Pytest configuration and shared fixtures.

Author: Barangay Platform Team
Version: 1.0.0
"""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from barangay_api.config.settings import Settings
from barangay_api.main import create_app
from barangay_api.security.config import GatePolicy, SecurityConfig, SecurityLimits
from barangay_api.security.gate import RequestGate
from barangay_api.security.sanitizer import PayloadSanitizer

TEST_ENV: dict[str, Any] = {
    "MAX_STRING_LENGTH": 200,
    "MAX_ARRAY_LENGTH": 5,
    "MAX_OBJECT_DEPTH": 3,
    "MAX_FILE_SIZE": 1024,
    "LOG_TO_FILE": False,
    "LOG_CONSOLE_ENABLED": False,
}


def _nest(levels: int, leaf: Any = "x") -> Any:
    value = leaf
    for _ in range(levels):
        value = {"a": value}
    return value


@pytest.fixture
def nest() -> Callable[..., Any]:
    """Wrap a leaf in N dicts; the leaf sits at depth N."""
    return _nest


@pytest.fixture
def limits():
    """Small limits so structural rejections are easy to trigger."""
    return SecurityLimits(max_string_length=200, max_array_length=5, max_object_depth=3)


@pytest.fixture
def sanitizer(limits):
    return PayloadSanitizer(limits)


@pytest.fixture
def gate():
    return RequestGate(GatePolicy())


@pytest.fixture
def security_config(limits):
    return SecurityConfig(limits=limits)


def _add_echo_routes(app: FastAPI) -> None:
    @app.post("/echo")
    async def echo_json(request: Request) -> dict[str, Any]:
        return {"received": await request.json()}

    @app.get("/echo")
    async def echo_query(request: Request) -> dict[str, Any]:
        return {"query": dict(request.query_params)}

    @app.post("/echo-form")
    async def echo_form(request: Request) -> dict[str, Any]:
        form = await request.form()
        return {"form": dict(form)}


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient over a fresh app; keyword overrides use env names."""

    def _make(**overrides: Any) -> TestClient:
        app = create_app(Settings(**{**TEST_ENV, **overrides}))
        _add_echo_routes(app)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
