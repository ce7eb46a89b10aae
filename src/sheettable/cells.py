"""
Per-cell value and format resolution.

Turns a raw ``CellData`` record into its display string, its typed
effective value and its number format. A cell of ``None`` is an absent
position in the grid (past the end of a short row); ``{}`` is a present
cell with nothing in it.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from sheettable.dates import serial_to_datetime

if TYPE_CHECKING:
    from sheettable.api_types import CellData, CellFormat

EffectiveValue = Union[str, float, int, datetime, None]
Clock = Callable[[], datetime]

NONE_FORMAT_TYPE = "NONE"


def formatted_value(cell: CellData | None) -> str | None:
    """Return the display string of a cell, or None when absent."""
    if cell is None:
        return None
    return cell.get("formattedValue")


def effective_value(
    cell: CellData | None, *, clock: Clock = datetime.now
) -> EffectiveValue:
    """Return the typed value of a cell, interpreted through its number format.

    - TEXT: the string value, or "" when missing
    - NUMBER / CURRENCY: the number value, or 0 when missing (a stored 0
      resolves the same way)
    - DATE: the serial converted to a datetime, or ``clock()`` when missing
    - cells without a format, or with any other format type: the display
      string

    Args:
        cell: CellData dictionary from Google Sheets API, or None if absent
        clock: Source of the current time for DATE cells without a value
    """
    if cell is None:
        return None

    cell_format = cell.get("effectiveFormat")
    if cell_format is None:
        return cell.get("formattedValue")

    number_format = cell_format.get("numberFormat")
    if number_format:
        value = cell.get("effectiveValue") or {}
        format_type = number_format.get("type")

        if format_type == "TEXT":
            return value.get("stringValue") or ""
        if format_type in ("NUMBER", "CURRENCY"):
            return value.get("numberValue") or 0
        if format_type == "DATE":
            serial = value.get("numberValue")
            if serial:
                return serial_to_datetime(serial)
            return clock()

    return cell.get("formattedValue")


def default_format() -> dict[str, Any]:
    """Return the format reported for cells that carry none."""
    return {"numberFormat": {"type": NONE_FORMAT_TYPE}}


def effective_format(cell: CellData | None) -> CellFormat | dict[str, Any]:
    """Return the cell's effective format, or the NONE default."""
    if cell is not None:
        cell_format = cell.get("effectiveFormat")
        if cell_format is not None:
            return cell_format
    return default_format()
