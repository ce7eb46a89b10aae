"""
Range spec normalization.

Callers name ranges as a bare sheet name, an A1 string such as
``"Formats!A1:E3"``, a ``{"name": ..., "range": ...}`` mapping, a
``NamedRange``, or a sequence of mappings/NamedRanges.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from sheettable.exceptions import MissingArgumentError

# Widest practical span when only a sheet name is given
DEFAULT_RANGE = "A:ZZ"

RangeSpec = Union[str, Mapping[str, Any], "NamedRange"]


@dataclass(frozen=True)
class NamedRange:
    """A sheet name with an optional A1 sub-range."""

    name: str
    range: str | None = None

    def a1(self) -> str:
        """Return the A1 notation used in the API request."""
        return f"{escape_sheet_title(self.name)}!{self.range or DEFAULT_RANGE}"


def escape_sheet_title(title: str) -> str:
    """Escape sheet title for use in A1 notation ranges.

    Sheet names containing spaces, special characters, or starting with
    digits need to be wrapped in single quotes.
    """
    needs_quoting = (
        " " in title
        or "'" in title
        or "!" in title
        or ":" in title
        or (len(title) > 0 and title[0].isdigit())
    )
    if needs_quoting:
        escaped = title.replace("'", "''")
        return f"'{escaped}'"
    return title


def to_a1(spec: NamedRange | str) -> str:
    """Return the A1 request string for a normalized spec.

    Strings that already contain a sheet/range separator pass through.
    """
    if isinstance(spec, str):
        if "!" in spec:
            return spec
        return NamedRange(spec).a1()
    return spec.a1()


def _coerce(spec: Any) -> NamedRange | str:
    if isinstance(spec, (str, NamedRange)):
        if not spec:
            raise MissingArgumentError("range")
        return spec
    if isinstance(spec, Mapping):
        name = spec.get("name")
        if not name:
            raise MissingArgumentError("name")
        return NamedRange(name=name, range=spec.get("range"))
    raise TypeError(f"Unsupported range spec: {spec!r}")


def normalize_ranges(
    specs: RangeSpec | Sequence[RangeSpec],
) -> tuple[list[NamedRange | str], bool]:
    """Normalize range specs into a list.

    Returns:
        Tuple of (specs in request order, whether a single spec was given)

    Raises:
        MissingArgumentError: If no range is given
        TypeError: If a spec is not a string, mapping or NamedRange
    """
    if isinstance(specs, (str, Mapping, NamedRange)):
        return [_coerce(specs)], True

    normalized = [_coerce(spec) for spec in specs]
    if not normalized:
        raise MissingArgumentError("ranges")
    return normalized, False


def split_sheet_prefix(a1: str) -> tuple[str | None, str]:
    """Split an A1 range into its sheet name and cell range.

    Examples:
        "A1:B5" -> (None, "A1:B5")
        "Sheet1!A1:B5" -> ("Sheet1", "A1:B5")
        "'My Sheet'!A:ZZ" -> ("My Sheet", "A:ZZ")
    """
    if a1.startswith("'"):
        end = a1.rfind("'!")
        if end > 0:
            return a1[1:end].replace("''", "'"), a1[end + 2 :]
    if "!" in a1:
        name, _, cells = a1.rpartition("!")
        return name, cells
    return None, a1


def sheet_name_of(spec: NamedRange | str) -> str | None:
    """Return the sheet title a normalized spec refers to."""
    if isinstance(spec, NamedRange):
        return spec.name
    name, _ = split_sheet_prefix(to_a1(spec))
    return name


def letter_to_column_index(letter: str) -> int:
    """Convert A1 notation letter(s) to a zero-based column index.

    Examples:
        A -> 0, B -> 1, Z -> 25, AA -> 26, ZZ -> 701
    """
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def a1_bounds(cells: str) -> tuple[int | None, int | None, int | None, int | None]:
    """Convert the cell part of an A1 range to zero-based half-open bounds.

    Returns (start_row, end_row, start_col, end_col); None means unbounded.

    Examples:
        "A1:E3" -> (0, 3, 0, 5)
        "A:ZZ" -> (None, None, 0, 702)
        "C2" -> (1, 2, 2, 3)
    """
    match = re.match(r"^([A-Za-z]*)(\d*)(?::([A-Za-z]*)(\d*))?$", cells)
    if not match:
        raise ValueError(f"Invalid A1 notation: {cells}")
    start_col, start_row, end_col, end_row = match.groups()
    if end_col is None and end_row is None:
        end_col, end_row = start_col, start_row

    return (
        int(start_row) - 1 if start_row else None,
        int(end_row) if end_row else None,
        letter_to_column_index(start_col) if start_col else None,
        letter_to_column_index(end_col) + 1 if end_col else None,
    )
