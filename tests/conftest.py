"""Shared test fixtures and utilities for texttv_mcp tests.

This module contains a fake upstream client and a controllable clock that
are used across the store and MCP test files.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from texttv_mcp.exceptions import FetchFailureError
from texttv_mcp.page_store import PageStore


class FakeTextTVClient:
    """In-memory stand-in for TextTVClient that records every fetch."""

    def __init__(
        self,
        payloads: Optional[Dict[int, Any]] = None,
        failures: Optional[Dict[int, Exception]] = None,
        delays: Optional[Dict[int, float]] = None,
    ) -> None:
        self.payloads: Dict[int, Any] = payloads or {}
        self.failures: Dict[int, Exception] = failures or {}
        self.delays: Dict[int, float] = delays or {}
        self.calls: List[int] = []

    async def fetch_page_payload(self, page_number: int) -> Any:
        self.calls.append(page_number)
        if page_number in self.delays:
            await asyncio.sleep(self.delays[page_number])
        if page_number in self.failures:
            raise self.failures[page_number]
        if page_number not in self.payloads:
            raise FetchFailureError("HTTP error! status: 404")
        return self.payloads[page_number]


class FakeClock:
    """Wall clock in milliseconds that only moves when told to."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += seconds * 1000


def make_payload(text: str, date_updated_unix: int = 1_700_000_000) -> List[Dict[str, Any]]:
    """Build an upstream response body for a single page."""
    return [
        {
            "num": "100",
            "title": "SVT Text",
            "content": [f"<div>{text}</div>"],
            "content_plain": [text],
            "date_updated_unix": date_updated_unix,
        }
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_client() -> FakeTextTVClient:
    return FakeTextTVClient(
        payloads={
            n: make_payload(f"Nyheter sida {n}\nInrikes och utrikes")
            for n in range(100, 110)
        }
    )


@pytest.fixture
def store(fake_client: FakeTextTVClient, clock: FakeClock) -> PageStore:
    """PageStore without opportunistic sweeps, driven by the fake clock."""
    return PageStore(fake_client, cleanup_probability=0.0, clock=clock)
