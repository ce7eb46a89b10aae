"""Conversion of spreadsheet serial dates.

Google Sheets stores dates as a count of days since 1899-12-30, with the
time of day as the fractional part.

The date part depends on the host time zone. The examples below, such as
42395 -> 2016-01-25, assume a host west of UTC; a host at or east of UTC
reads 42395 as 2016-01-26. Pass ``tz`` to pin the result.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone, tzinfo

# Days between the spreadsheet epoch (1899-12-30) and the Unix epoch
UNIX_EPOCH_SERIAL = 25569
SECONDS_PER_DAY = 86400

# Absorbs rounding noise in the fractional day (e.g. 0.49999999 for noon)
FRACTION_EPSILON = 0.0000001

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def serial_to_datetime(serial: float, tz: tzinfo | None = None) -> datetime:
    """Convert a serial date number to a naive local datetime.

    The whole-day part is taken as midnight UTC of that day and read back
    as a calendar date in ``tz`` (the host's local zone by default), so
    hosts west of UTC land on the previous day. The fractional part gives
    the wall-clock time on that date.

    Examples (host at UTC-3):
        42395 -> 2016-01-25 00:00:00
        42395.5 -> 2016-01-25 12:00:00
    """
    unix_days = math.floor(serial - UNIX_EPOCH_SERIAL)
    day = (_UNIX_EPOCH + timedelta(days=unix_days)).astimezone(tz)

    fractional_day = serial - math.floor(serial) + FRACTION_EPSILON
    total_seconds = math.floor(SECONDS_PER_DAY * fractional_day)

    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    # A fraction within epsilon of 1 rolls over to the next day
    return datetime(day.year, day.month, day.day) + timedelta(
        hours=hours, minutes=minutes, seconds=seconds
    )
