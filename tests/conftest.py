"""Shared test fixtures for sheettable."""

from __future__ import annotations

import time
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio

from sheettable.client import SpreadsheetClient
from sheettable.transport import LocalFileTransport

GOLDEN_DIR = Path(__file__).parent / "golden"
SPREADSHEET_ID = "formats_spreadsheet"
FIXED_NOW = datetime(2020, 2, 29, 8, 30, 0)


@pytest.fixture
def golden_dir() -> Path:
    return GOLDEN_DIR


@pytest.fixture
def west_of_utc(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run with the host clock at UTC-3 (POSIX TZ syntax, no tzdata needed)."""
    monkeypatch.setenv("TZ", "BRT3")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    """Create a transport that reads from golden files."""
    return LocalFileTransport(golden_dir)


@pytest_asyncio.fixture
async def client(local_transport: LocalFileTransport) -> SpreadsheetClient:
    """Create a SpreadsheetClient authorized with an API key."""
    client = SpreadsheetClient(
        SPREADSHEET_ID, local_transport, clock=lambda: FIXED_NOW
    )
    await client.authorize_api_key("test-api-key")
    return client
