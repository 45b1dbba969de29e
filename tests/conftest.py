from __future__ import annotations

import json
import logging
from typing import Any, Callable

import httpx
import pytest

from connectors.registry import VendorRegistry
from models.vendor import Vendor


class SleepRecorder:
    """asyncio.sleep de test : n'attend pas, note les délais demandés."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def json_response(status_code: int = 200, payload: Any = None, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload, **kwargs)


def envelope(data: Any = None, success: bool = True, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success, "data": data}
    if error is not None:
        body["error"] = error
    return body


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content or b"null")


def make_transport(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("vendorlink.tests")


@pytest.fixture
def registry(logger) -> VendorRegistry:
    return VendorRegistry(logger=logger)


@pytest.fixture
def empty_registry(logger) -> VendorRegistry:
    return VendorRegistry(logger=logger, seed_defaults=False)


@pytest.fixture
def make_vendor() -> Callable[..., Vendor]:
    def _make(vendor_type: str = "ingram_micro", **overrides: Any) -> Vendor:
        data = {
            "id": "vendor-1",
            "tenant_id": "tenant-1",
            "name": "Test Vendor",
            "type": vendor_type,
        }
        data.update(overrides)
        return Vendor(**data)

    return _make
