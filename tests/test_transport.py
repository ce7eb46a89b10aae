"""Tests for the transport layer."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from sheettable.credentials import ApiKeyCredential, Credential
from sheettable.transport import (
    GRID_FIELDS,
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    TransportError,
)

SHEETS_BASE = "https://sheets.test/v4/spreadsheets"
DRIVE_BASE = "https://drive.test/v3/files"


class BearerCredential(Credential):
    def request_params(self) -> dict[str, str]:
        return {}

    def request_headers(self) -> dict[str, str]:
        return {"Authorization": "Bearer abc"}


def make_transport(handler) -> GoogleSheetsTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleSheetsTransport(
        sheets_api_base=SHEETS_BASE, drive_api_base=DRIVE_BASE, client=client
    )


class TestGoogleSheetsTransport:
    """Tests for request shaping and error mapping."""

    @pytest.mark.asyncio
    async def test_grid_data_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"sheets": [{"properties": {"title": "A"}}]})

        transport = make_transport(handler)
        result = await transport.get_grid_data(
            ApiKeyCredential("k1"), "doc1", ["A!A:ZZ", "'B c'!A1:B2"]
        )
        await transport.close()

        assert result == {"sheets": [{"properties": {"title": "A"}}]}
        request = seen[0]
        assert request.url.path == "/v4/spreadsheets/doc1"
        assert request.url.params.get_list("ranges") == ["A!A:ZZ", "'B c'!A1:B2"]
        assert request.url.params["includeGridData"] == "true"
        assert request.url.params["fields"] == GRID_FIELDS
        assert request.url.params["key"] == "k1"

    @pytest.mark.asyncio
    async def test_bearer_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"modifiedTime": "2016-06-02T14:20:35Z"})

        transport = make_transport(handler)
        result = await transport.get_document_metadata(BearerCredential(), "doc1")

        assert result == {"modifiedTime": "2016-06-02T14:20:35Z"}
        assert seen[0].url.path == "/v3/files/doc1"
        assert seen[0].url.params["fields"] == "modifiedTime"
        assert seen[0].headers["Authorization"] == "Bearer abc"
        assert "key" not in seen[0].url.params

    @pytest.mark.asyncio
    async def test_sheet_properties(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["fields"] == "sheets.properties"
            return httpx.Response(
                200,
                json={
                    "sheets": [
                        {"properties": {"title": "Formats"}},
                        {"properties": {"title": "Class Data"}},
                    ]
                },
            )

        transport = make_transport(handler)
        props = await transport.get_sheet_properties(ApiKeyCredential("k"), "doc1")
        assert [p["title"] for p in props] == ["Formats", "Class Data"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
            (400, APIError),
            (500, APIError),
        ],
    )
    async def test_status_errors(self, status: int, error: type[Exception]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text="nope")

        transport = make_transport(handler)
        with pytest.raises(error):
            await transport.get_grid_data(ApiKeyCredential("k"), "doc1", ["A!A:ZZ"])

    @pytest.mark.asyncio
    async def test_api_error_keeps_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="Unable to parse range")

        transport = make_transport(handler)
        with pytest.raises(APIError) as exc_info:
            await transport.get_grid_data(ApiKeyCredential("k"), "doc1", ["A!A:ZZ"])
        assert exc_info.value.status_code == 400
        assert "Unable to parse range" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.get_grid_data(ApiKeyCredential("k"), "doc1", ["A!A:ZZ"])
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestLocalFileTransport:
    """Tests for the golden-file transport."""

    @pytest.mark.asyncio
    async def test_returns_sheets_in_tab_order(self, golden_dir: Path) -> None:
        transport = LocalFileTransport(golden_dir)
        result = await transport.get_grid_data(
            ApiKeyCredential("k"),
            "formats_spreadsheet",
            ["'Class Data'!A:ZZ", "Formats!A1:E3"],
        )
        titles = [s["properties"]["title"] for s in result["sheets"]]
        assert titles == ["Formats", "Class Data"]
        assert transport.requested_ranges == [["'Class Data'!A:ZZ", "Formats!A1:E3"]]

    @pytest.mark.asyncio
    async def test_one_grid_per_range_on_the_same_sheet(self, golden_dir: Path) -> None:
        transport = LocalFileTransport(golden_dir)
        result = await transport.get_grid_data(
            ApiKeyCredential("k"),
            "formats_spreadsheet",
            ["Formats!D1:E3", "'Class Data'!A1:B2", "Formats!A1:B2"],
        )

        sheets = result["sheets"]
        assert [s["properties"]["title"] for s in sheets] == ["Formats", "Class Data"]
        formats = sheets[0]["data"]
        assert len(formats) == 2
        assert [c["formattedValue"] for c in formats[0]["rowData"][0]["values"]] == [
            "Number",
            "Plain Text",
        ]
        assert formats[0]["startColumn"] == 3
        assert len(formats[0]["rowData"]) == 3
        assert [c["formattedValue"] for c in formats[1]["rowData"][0]["values"]] == [
            "Automatic",
            "Currency",
        ]
        assert len(formats[1]["rowData"]) == 2
        assert len(sheets[1]["data"]) == 1

    @pytest.mark.asyncio
    async def test_empty_sheet_grid_has_no_rows(self, golden_dir: Path) -> None:
        transport = LocalFileTransport(golden_dir)
        result = await transport.get_grid_data(
            ApiKeyCredential("k"), "formats_spreadsheet", ["Empty!A:ZZ"]
        )
        assert result["sheets"][0]["data"] == [{"startRow": 0, "startColumn": 0}]

    @pytest.mark.asyncio
    async def test_unknown_sheet(self, golden_dir: Path) -> None:
        transport = LocalFileTransport(golden_dir)
        with pytest.raises(APIError):
            await transport.get_grid_data(
                ApiKeyCredential("k"), "formats_spreadsheet", ["Nope!A:ZZ"]
            )

    @pytest.mark.asyncio
    async def test_unknown_spreadsheet(self, golden_dir: Path) -> None:
        transport = LocalFileTransport(golden_dir)
        with pytest.raises(NotFoundError):
            await transport.get_document_metadata(ApiKeyCredential("k"), "missing")
