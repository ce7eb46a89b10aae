"""Tests for sheettable.config module."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from sheettable.config import Settings, get_settings
from sheettable.transport import GoogleSheetsTransport


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHEETTABLE_TIMEOUT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.sheets_api_base == "https://sheets.googleapis.com/v4/spreadsheets"
    assert settings.drive_api_base == "https://www.googleapis.com/drive/v3/files"
    assert settings.timeout == 60


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHEETTABLE_TIMEOUT", "5")
    monkeypatch.setenv("SHEETTABLE_API_KEY", "AIza-env")
    settings = get_settings()
    assert settings.timeout == 5
    assert settings.api_key == "AIza-env"


@pytest.mark.asyncio
async def test_transport_reads_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHEETTABLE_SHEETS_API_BASE", "https://sheets.example/v4")
    transport = GoogleSheetsTransport()
    assert transport._sheets_api_base == "https://sheets.example/v4"
    await transport.close()
