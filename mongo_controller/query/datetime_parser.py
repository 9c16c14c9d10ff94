"""
This module provides ISO 8601 detection and parsing for the value normalizer.

A filter value is only treated as a date/time when its whole text matches the
ISO 8601 calendar grammar below: a year with month (and optionally day), an
optional time part separated by `T` or a space, and an optional `Z` or
`+HH[:MM]` offset. Matching text is parsed with `dateutil`; values without an
offset are taken as UTC so that the result is always timezone-aware.
"""

import re
from datetime import UTC, datetime

from dateutil import parser as date_parser

# Regular expression for YYYY-MM[-DD] date format.
date_expr = r"(?P<year>\d{4})-(?P<month>\d{2})(?:-(?P<day>\d{2}))?"
# Regular expression for HH:MM[:SS[.ffffff]] time format.
time_expr = (
    r"(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?"  # Optional seconds and fraction
)
# Optional timezone information (Z, +HH, +HH:MM or +HHMM).
tz_expr = r"(?P<tzinfo>[zZ]|[+-]\d{2}(?::?\d{2})?)?"

# Matches an ISO 8601 date with an optional time part, anchored on both ends.
iso8601_re = re.compile(f"^{date_expr}(?:[T ]{time_expr}{tz_expr})?$")


def is_iso8601(value: str) -> bool:
    """Returns True when `value` matches the ISO 8601 date/date-time grammar."""
    return iso8601_re.match(value) is not None


def parse_iso8601(value: str) -> datetime | None:
    """
    Parse an ISO 8601 string into a timezone-aware `datetime`.

    Args:
        value (str): The text to parse.

    Returns:
        datetime | None: The parsed datetime (UTC when no offset was given), or
                         None when the text is not ISO 8601 or names an
                         impossible date such as `2023-02-30`.
    """
    if not is_iso8601(value):
        return None

    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
