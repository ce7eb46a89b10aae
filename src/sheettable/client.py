"""SpreadsheetClient - Main API for sheettable.

Fetches ranges of a Google spreadsheet and returns them as row-oriented
or column-oriented tables.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from sheettable.cells import Clock
from sheettable.credentials import (
    ApiKeyCredential,
    Credential,
    ServiceAccountCredential,
)
from sheettable.exceptions import (
    MalformedGridError,
    MissingArgumentError,
    MissingCredentialError,
)
from sheettable.ranges import (
    NamedRange,
    RangeSpec,
    normalize_ranges,
    sheet_name_of,
    to_a1,
)
from sheettable.tables import (
    ColumnTable,
    RowTable,
    sheet_title,
    sheet_to_columns,
    sheet_to_table,
)
from sheettable.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    NotFoundError,
    Transport,
    TransportError,
)

if TYPE_CHECKING:
    from sheettable.api_types import Sheet

# Re-export exceptions for convenience
__all__ = [
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "SpreadsheetClient",
    "TransportError",
]


class SpreadsheetClient:
    """Client for reading a Google spreadsheet as tables.

    Each method issues at most one request. Errors from the transport
    propagate unchanged.

    Example:
        >>> client = SpreadsheetClient("1amfst1WVcQDntGe6walYt-4O5SCrHBD5WntbjhvfIm4")
        >>> await client.authorize_api_key("AIza...")
        >>> table = await client.table("Formats!A1:E3")
        >>> table.headers
        ('Automatic', 'Currency', 'Date', 'Number', 'Plain Text')
    """

    def __init__(
        self,
        spreadsheet_id: str,
        transport: Transport | None = None,
        *,
        clock: Clock = datetime.now,
    ) -> None:
        """Initialize the client.

        Args:
            spreadsheet_id: The ID of the spreadsheet (from the URL)
            transport: Transport for API calls, defaults to GoogleSheetsTransport
            clock: Current-time source for DATE cells without a value

        Raises:
            MissingArgumentError: If spreadsheet_id is empty
        """
        if not spreadsheet_id:
            raise MissingArgumentError("spreadsheetId")
        self.spreadsheet_id = spreadsheet_id
        self._transport = transport or GoogleSheetsTransport()
        self._clock = clock
        self._credential: Credential | None = None

    @property
    def credential(self) -> Credential | None:
        return self._credential

    async def authorize_service_account(
        self,
        key: Mapping[str, Any] | str | Path | None,
        scopes: Sequence[str] | None = None,
    ) -> None:
        """Authenticate with a service account key and mint a token.

        Args:
            key: Key info with ``client_email`` and ``private_key``, or a
                path to the JSON key file
            scopes: OAuth scopes, defaults to read-only access

        Raises:
            MissingCredentialError: If key is empty
        """
        if not key:
            raise MissingCredentialError("key")
        credential = ServiceAccountCredential.from_key(key, scopes)
        await credential.refresh()
        self._credential = credential
        logger.debug("Authorized as {}", credential.service_account_email)

    async def authorize_api_key(self, key: str | None) -> None:
        """Use an API key for read-only access.

        Raises:
            MissingCredentialError: If key is empty
        """
        if not key:
            raise MissingCredentialError("apikey")
        self._credential = ApiKeyCredential(key)
        logger.debug("Authorized with API key")

    def _require_credential(self) -> Credential:
        if self._credential is None:
            raise MissingCredentialError("credential")
        return self._credential

    async def get_last_update_timestamp(self) -> str:
        """Return the last update time of the spreadsheet.

        The timestamp is an RFC 3339 string such as
        ``1985-04-12T23:20:50.52Z``.
        """
        metadata = await self._transport.get_document_metadata(
            self._require_credential(), self.spreadsheet_id
        )
        return metadata["modifiedTime"]

    async def list_sheet_names(self) -> list[str]:
        """Return sheet titles in tab order."""
        properties = await self._transport.get_sheet_properties(
            self._require_credential(), self.spreadsheet_id
        )
        return [props.get("title", "") for props in properties]

    async def _fetch_grids(
        self, specs: Sequence[NamedRange | str]
    ) -> list[tuple[Sheet, int]]:
        """Fetch the ranges and pair each with its sheet and GridData index.

        The response lists every sheet once, in tab order, with one GridData
        per range requested on it. Ranges are matched back by sheet title,
        consuming that sheet's GridData entries in request order.
        """
        a1_ranges = [to_a1(spec) for spec in specs]
        logger.debug("Fetching {} from {}", a1_ranges, self.spreadsheet_id)
        spreadsheet = await self._transport.get_grid_data(
            self._require_credential(), self.spreadsheet_id, a1_ranges
        )
        by_title = {
            sheet_title(sheet): sheet for sheet in spreadsheet.get("sheets", [])
        }

        used: dict[str | None, int] = {}
        grids = []
        for spec, a1 in zip(specs, a1_ranges):
            name = sheet_name_of(spec)
            if name not in by_title:
                raise MalformedGridError(f"No sheet in response for range {a1}")
            index = used.get(name, 0)
            used[name] = index + 1
            grids.append((by_title[name], index))
        return grids

    async def table(self, range_spec: RangeSpec) -> RowTable:
        """Return a range in row-oriented form.

        Note: Formats are retrieved from the first data row.

        Args:
            range_spec: Sheet name, A1 range ("Formats!A1:E3") or
                {"name": ..., "range": ...}
        """
        specs, _ = normalize_ranges(range_spec)
        [(sheet, index)] = await self._fetch_grids(specs[:1])
        return sheet_to_table(sheet, index, clock=self._clock)

    async def table_columns(self, range_spec: RangeSpec) -> ColumnTable:
        """Return a range in column-oriented form.

        Each column holds the values of every data row:

            (Column(header='Automatic', values=('Oil', 'Grass'),
                    string_values=('Oil', 'Grass'),
                    format={'numberFormat': {'type': 'NONE'}}),
             Column(header='Currency', values=(0.41, 1.3),
                    string_values=('$0.41', '$1.30'),
                    format={'numberFormat': {'type': 'CURRENCY', 'pattern': '"$"#,##0.00'}}),
             ...)

        Note: Formats are retrieved from the first data row.
        """
        specs, _ = normalize_ranges(range_spec)
        [(sheet, index)] = await self._fetch_grids(specs[:1])
        return sheet_to_columns(sheet, index, clock=self._clock)

    async def tables(
        self, range_specs: RangeSpec | Sequence[RangeSpec]
    ) -> RowTable | list[RowTable]:
        """Return one or more ranges in row-oriented form, in one request.

        Args:
            range_specs: A single spec (returns one RowTable) or a sequence
                of specs (returns a list in the same order)

        Example:
            >>> first, second = await client.tables(
            ...     [{"name": "Class Data"}, {"name": "Formats", "range": "A1:E3"}]
            ... )
        """
        specs, single = normalize_ranges(range_specs)
        grids = await self._fetch_grids(specs)
        tables = [
            sheet_to_table(sheet, index, clock=self._clock) for sheet, index in grids
        ]
        if single:
            return tables[0]
        return tables

    async def close(self) -> None:
        await self._transport.close()
