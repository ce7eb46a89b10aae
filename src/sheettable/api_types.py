"""
Google Sheets API Types

The subset of the Google Sheets API v4 response consumed by sheettable.
Every field is optional: the API omits empty values, so all access must
go through ``.get()``.
"""

from __future__ import annotations

from typing import TypedDict


class NumberFormat(TypedDict, total=False):
    """The number format of a cell."""

    # Pattern string used for formatting. If not set, a default pattern based
    # on the user's locale will be used if necessary for the given type.
    pattern: str

    # The type of the number format.
    # Enum values:
    #   "NUMBER_FORMAT_TYPE_UNSPECIFIED", "TEXT", "NUMBER", "PERCENT",
    #   "CURRENCY", "DATE", "TIME", "DATE_TIME", "SCIENTIFIC"
    type: str


class CellFormat(TypedDict, total=False):
    """The format of a cell. Only the number format is requested."""

    numberFormat: NumberFormat


class ExtendedValue(TypedDict, total=False):
    """The kinds of value that a cell in a spreadsheet can have."""

    boolValue: bool
    formulaValue: str
    numberValue: float
    stringValue: str


class CellData(TypedDict, total=False):
    """Data about a specific cell."""

    # The effective format being used by the cell.
    effectiveFormat: CellFormat

    # The effective value of the cell. For cells with formulas, this is the
    # calculated value.
    effectiveValue: ExtendedValue

    # The formatted value of the cell, as it is shown to the user.
    formattedValue: str


class RowData(TypedDict, total=False):
    """Data about each cell in a row."""

    values: list[CellData]


class GridData(TypedDict, total=False):
    """Data in the grid, as well as metadata about the dimensions."""

    rowData: list[RowData]
    startColumn: int
    startRow: int


class SheetProperties(TypedDict, total=False):
    """Properties of a sheet."""

    index: int
    sheetId: int
    sheetType: str
    title: str


class Sheet(TypedDict, total=False):
    """A sheet in a spreadsheet. One GridData entry per requested range."""

    data: list[GridData]
    properties: SheetProperties


class SpreadsheetProperties(TypedDict, total=False):
    """Properties of a spreadsheet."""

    locale: str
    timeZone: str
    title: str


class Spreadsheet(TypedDict, total=False):
    """Resource that represents a spreadsheet."""

    properties: SpreadsheetProperties
    sheets: list[Sheet]
    spreadsheetId: str
