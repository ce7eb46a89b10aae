"""
Grid to table shaping.

Builds row-oriented and column-oriented tables from the raw cell grid of
a sheet. The first grid row holds the headers; every later row is data.
Column formats are sampled from the first data row, since header cells
are plain text while the cells below them carry the applied format.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from loguru import logger

from sheettable.cells import (
    Clock,
    EffectiveValue,
    effective_format,
    effective_value,
    formatted_value,
)
from sheettable.exceptions import MalformedGridError

if TYPE_CHECKING:
    from sheettable.api_types import CellData, Sheet

Row = Sequence[Optional["CellData"]]
Grid = Sequence[Row]


@dataclass(frozen=True)
class CellValue:
    """The typed value and display string of one cell."""

    value: EffectiveValue
    string_value: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "stringValue": self.string_value}


@dataclass(frozen=True)
class RowTable:
    """A sheet shaped as rows keyed by header name.

    Attributes:
        title: Title of the sheet the table was read from.
        headers: Display strings of the header row, in order.
        formats: One number format per header.
        rows: One mapping of header -> CellValue per data row. Duplicate
            header names collide, and the rightmost cell wins.
    """

    title: str
    headers: tuple[str | None, ...]
    formats: tuple[dict[str, Any], ...]
    rows: tuple[dict[str | None, CellValue], ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "headers": list(self.headers),
            "formats": list(self.formats),
            "rows": [
                {header: cell.to_dict() for header, cell in row.items()}
                for row in self.rows
            ],
        }


@dataclass(frozen=True)
class Column:
    """One column of a sheet, with values aligned to the data rows."""

    header: str | None
    values: tuple[EffectiveValue, ...]
    string_values: tuple[str | None, ...]
    format: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header,
            "values": list(self.values),
            "stringValues": list(self.string_values),
            "format": self.format,
        }


ColumnTable = tuple[Column, ...]


def _cell_at(row: Row, index: int) -> CellData | None:
    """Return the cell at index, or None past the end of a short row."""
    if index < len(row):
        return row[index]
    return None


def _split_grid(
    grid: Grid,
) -> tuple[tuple[str | None, ...], Grid, tuple[dict[str, Any], ...]]:
    if not grid:
        raise MalformedGridError()
    headers = tuple(formatted_value(cell) for cell in grid[0])
    data_rows = grid[1:]
    formats = _sample_formats(headers, data_rows)
    return headers, data_rows, formats


def _sample_formats(headers: tuple, data_rows: Grid) -> tuple[dict[str, Any], ...]:
    sample_row: Row = data_rows[0] if data_rows else ()
    return tuple(
        effective_format(_cell_at(sample_row, index)) for index in range(len(headers))
    )


def assemble_table(
    title: str, grid: Grid, *, clock: Clock = datetime.now
) -> RowTable:
    """Build a row-oriented table from a raw grid.

    Args:
        title: Sheet title to carry on the table
        grid: Rows of CellData; the first row is the header row
        clock: Current-time source for DATE cells without a value

    Raises:
        MalformedGridError: If the grid has no rows at all
    """
    headers, data_rows, formats = _split_grid(grid)

    rows = tuple(
        {
            header: CellValue(
                value=effective_value(_cell_at(row, index), clock=clock),
                string_value=formatted_value(_cell_at(row, index)),
            )
            for index, header in enumerate(headers)
        }
        for row in data_rows
    )
    return RowTable(title=title, headers=headers, formats=formats, rows=rows)


def assemble_columns(grid: Grid, *, clock: Clock = datetime.now) -> ColumnTable:
    """Build a column-oriented table from a raw grid.

    Raises:
        MalformedGridError: If the grid has no rows at all
    """
    headers, data_rows, formats = _split_grid(grid)

    return tuple(
        Column(
            header=header,
            values=tuple(
                effective_value(_cell_at(row, index), clock=clock) for row in data_rows
            ),
            string_values=tuple(
                formatted_value(_cell_at(row, index)) for row in data_rows
            ),
            format=formats[index],
        )
        for index, header in enumerate(headers)
    )


def grid_from_sheet(sheet: Sheet, index: int = 0) -> list[list[CellData]] | None:
    """Extract the cell grid of one requested range of a sheet.

    A sheet carries one GridData entry per range requested on it, in
    request order. Returns None when that entry is missing or has no
    rows (an empty sheet).
    """
    data = sheet.get("data") or []
    if index >= len(data):
        return None
    row_data = data[index].get("rowData")
    if not row_data:
        return None
    return [list(row.get("values", [])) for row in row_data]


def sheet_title(sheet: Sheet) -> str:
    return sheet.get("properties", {}).get("title", "")


def sheet_to_table(
    sheet: Sheet, index: int = 0, *, clock: Clock = datetime.now
) -> RowTable:
    """Build a row-oriented table from one range of a Sheet in a grid data response."""
    title = sheet_title(sheet)
    grid = grid_from_sheet(sheet, index)
    if grid is None:
        logger.debug("Sheet '{}' has no data, returning empty table", title)
        return RowTable(title=title, headers=(), formats=(), rows=())

    table = assemble_table(title, grid, clock=clock)
    logger.debug(
        "Assembled '{}': {} columns, {} rows", title, len(table.headers), len(table.rows)
    )
    return table


def sheet_to_columns(
    sheet: Sheet, index: int = 0, *, clock: Clock = datetime.now
) -> ColumnTable:
    """Build a column-oriented table from one range of a Sheet in a grid data response."""
    grid = grid_from_sheet(sheet, index)
    if grid is None:
        logger.debug("Sheet '{}' has no data, returning no columns", sheet_title(sheet))
        return ()
    return assemble_columns(grid, clock=clock)
