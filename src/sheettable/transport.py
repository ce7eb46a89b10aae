"""Transport layer for fetching spreadsheet data.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using the Sheets and Drive APIs
- LocalFileTransport: Test transport reading from local golden files

Transports raise their own TransportError subclasses. Callers receive them
unchanged; nothing here retries.
"""

from __future__ import annotations

import json
import ssl
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import TYPE_CHECKING, Any

import certifi
import httpx
from loguru import logger

from sheettable.config import get_settings
from sheettable.ranges import a1_bounds, split_sheet_prefix

if TYPE_CHECKING:
    from sheettable.api_types import (
        GridData,
        RowData,
        Sheet,
        SheetProperties,
        Spreadsheet,
    )
    from sheettable.credentials import Credential

GRID_FIELDS = (
    "properties.title,"
    "sheets.properties,"
    "sheets.data("
    "rowData.values.effectiveValue,"
    "rowData.values.formattedValue,"
    "rowData.values.effectiveFormat.numberFormat)"
)
MODIFIED_TIME_FIELDS = "modifiedTime"


class TransportError(Exception):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when spreadsheet is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class Transport(ABC):
    """Abstract base class for spreadsheet data transport.

    Every call receives the credential to authenticate with, so a single
    transport can serve several clients.
    """

    @abstractmethod
    async def get_grid_data(
        self,
        credential: Credential,
        spreadsheet_id: str,
        ranges: Sequence[str],
        fields: str = GRID_FIELDS,
    ) -> Spreadsheet:
        """Fetch cell data for the given A1 ranges in one request.

        Returns:
            Spreadsheet whose sheets appear once each, in tab order, and only
            if a range was requested on them. Each sheet carries one
            GridData entry per range requested on it, in request order.
        """
        ...

    @abstractmethod
    async def get_document_metadata(
        self,
        credential: Credential,
        spreadsheet_id: str,
        fields: str = MODIFIED_TIME_FIELDS,
    ) -> dict[str, Any]:
        """Fetch file metadata (e.g. modifiedTime) for the spreadsheet."""
        ...

    @abstractmethod
    async def get_sheet_properties(
        self, credential: Credential, spreadsheet_id: str
    ) -> list[SheetProperties]:
        """Fetch the properties of every sheet, in tab order."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport that fetches data from Google APIs.

    Handles SSL and HTTP communication. Authentication comes from the
    credential passed to each call.
    """

    def __init__(
        self,
        timeout: int | None = None,
        *,
        sheets_api_base: str | None = None,
        drive_api_base: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds (defaults to settings)
            sheets_api_base: Sheets API spreadsheets endpoint (defaults to settings)
            drive_api_base: Drive API files endpoint (defaults to settings)
            client: Pre-built HTTP client, mainly for tests
        """
        settings = get_settings()
        self._timeout = timeout or settings.timeout
        self._sheets_api_base = sheets_api_base or settings.sheets_api_base
        self._drive_api_base = drive_api_base or settings.drive_api_base
        if client is None:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=ssl_context,
                headers={"Accept": "application/json"},
            )
        self._client = client

    async def get_grid_data(
        self,
        credential: Credential,
        spreadsheet_id: str,
        ranges: Sequence[str],
        fields: str = GRID_FIELDS,
    ) -> Spreadsheet:
        """Fetch grid data from Google Sheets API."""
        url = f"{self._sheets_api_base}/{spreadsheet_id}"
        params: list[tuple[str, str]] = [
            ("includeGridData", "true"),
            ("fields", fields),
        ]
        params.extend(("ranges", r) for r in ranges)
        result: Spreadsheet = await self._request(credential, url, params)  # type: ignore[assignment]
        return result

    async def get_document_metadata(
        self,
        credential: Credential,
        spreadsheet_id: str,
        fields: str = MODIFIED_TIME_FIELDS,
    ) -> dict[str, Any]:
        """Fetch file metadata from Google Drive API."""
        url = f"{self._drive_api_base}/{spreadsheet_id}"
        return await self._request(credential, url, [("fields", fields)])

    async def get_sheet_properties(
        self, credential: Credential, spreadsheet_id: str
    ) -> list[SheetProperties]:
        """Fetch sheet properties from Google Sheets API."""
        url = f"{self._sheets_api_base}/{spreadsheet_id}"
        response = await self._request(
            credential, url, [("fields", "sheets.properties")]
        )
        return [sheet.get("properties", {}) for sheet in response.get("sheets", [])]

    async def _request(
        self,
        credential: Credential,
        url: str,
        params: list[tuple[str, str]],
    ) -> dict[str, Any]:
        """Make an authenticated GET request."""
        await credential.ensure_valid()
        params = params + list(credential.request_params().items())
        logger.debug("GET {} {}", url, [p for p in params if p[0] != "key"])
        try:
            response = await self._client.get(
                url, params=params, headers=credential.request_headers()
            )
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired credentials") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and sharing permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    "Spreadsheet not found. Check the ID and sharing permissions."
                ) from e
            body = e.response.text
            raise APIError(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <spreadsheet_id>/
                spreadsheet.json   (spreadsheets.get response, all sheets)
                drive.json         (files.get response)

    Grid requests answer in the shape of the Sheets API: each requested
    sheet once, in tab order, with one GridData per range on it. The golden
    sheet data must start at A1; cell sub-ranges are sliced from it.
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden test files
        """
        self._golden_dir = golden_dir
        self.requested_ranges: list[list[str]] = []

    def _read(self, spreadsheet_id: str, name: str) -> dict[str, Any]:
        path = self._golden_dir / spreadsheet_id / name
        if not path.exists():
            raise NotFoundError(f"Golden file not found: {path}")
        result: dict[str, Any] = json.loads(path.read_text())
        return result

    async def get_grid_data(
        self,
        credential: Credential,
        spreadsheet_id: str,
        ranges: Sequence[str],
        fields: str = GRID_FIELDS,
    ) -> Spreadsheet:
        """Read grid data from local file."""
        self.requested_ranges.append(list(ranges))
        response = self._read(spreadsheet_id, "spreadsheet.json")
        golden_sheets = response.get("sheets", [])
        titles = [sheet.get("properties", {}).get("title") for sheet in golden_sheets]

        grids: dict[str, list[GridData]] = {}
        for a1 in ranges:
            name, cells = split_sheet_prefix(a1)
            if name not in titles:
                raise APIError(f"Unable to parse range: {a1}", status_code=400)
            sheet = golden_sheets[titles.index(name)]
            grids.setdefault(name, []).append(_slice_grid(sheet, cells))

        sheets: list[Sheet] = [
            {"properties": sheet.get("properties", {}), "data": grids[title]}
            for sheet, title in zip(golden_sheets, titles)
            if title in grids
        ]
        return {"properties": response.get("properties", {}), "sheets": sheets}

    async def get_document_metadata(
        self,
        credential: Credential,
        spreadsheet_id: str,
        fields: str = MODIFIED_TIME_FIELDS,
    ) -> dict[str, Any]:
        """Read file metadata from local file."""
        return self._read(spreadsheet_id, "drive.json")

    async def get_sheet_properties(
        self, credential: Credential, spreadsheet_id: str
    ) -> list[SheetProperties]:
        """Read sheet properties from local file."""
        response = self._read(spreadsheet_id, "spreadsheet.json")
        return [sheet.get("properties", {}) for sheet in response.get("sheets", [])]

    async def close(self) -> None:
        """No-op for local file transport."""
        pass


def _slice_grid(sheet: Sheet, cells: str) -> GridData:
    """Cut an A1 cell range out of a golden sheet whose data starts at A1."""
    start_row, end_row, start_col, end_col = a1_bounds(cells)
    data = sheet.get("data") or [{}]
    rows = data[0].get("rowData", [])[start_row:end_row]

    row_data: list[RowData] = []
    for row in rows:
        if "values" in row:
            row_data.append({"values": row["values"][start_col:end_col]})
        else:
            row_data.append({})

    grid: GridData = {"startRow": start_row or 0, "startColumn": start_col or 0}
    if row_data:
        grid["rowData"] = row_data
    return grid
