"""sheettable - Google Sheets ranges as plain tables.

Reads the cell grid of a spreadsheet range and reshapes it into
row-oriented or column-oriented tables with typed values, display
strings and per-column number formats.
"""

__version__ = "0.1.0"

from loguru import logger

from sheettable.cells import effective_format, effective_value, formatted_value
from sheettable.client import SpreadsheetClient
from sheettable.dates import serial_to_datetime
from sheettable.exceptions import (
    MalformedGridError,
    MissingArgumentError,
    MissingCredentialError,
    SheetTableError,
)
from sheettable.ranges import NamedRange
from sheettable.tables import (
    CellValue,
    Column,
    ColumnTable,
    RowTable,
    assemble_columns,
    assemble_table,
)
from sheettable.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    Transport,
    TransportError,
)

logger.disable("sheettable")

__all__ = [
    "APIError",
    "AuthenticationError",
    "CellValue",
    "Column",
    "ColumnTable",
    "GoogleSheetsTransport",
    "LocalFileTransport",
    "MalformedGridError",
    "MissingArgumentError",
    "MissingCredentialError",
    "NamedRange",
    "NotFoundError",
    "RowTable",
    "SheetTableError",
    "SpreadsheetClient",
    "Transport",
    "TransportError",
    "__version__",
    "assemble_columns",
    "assemble_table",
    "effective_format",
    "effective_value",
    "formatted_value",
    "serial_to_datetime",
]
