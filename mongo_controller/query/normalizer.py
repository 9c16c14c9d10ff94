"""
This module converts untyped filter and search values into typed values.

Values arriving from query strings are plain text. Before they are embedded in
a `$match` stage, `normalize` infers the most likely type for each of them:
booleans, numbers, ISO 8601 dates, nested JSON objects and arrays. The rules are
applied in a fixed order and the first one that matches wins:

1. Reject values mentioning `$function` or `$accumulator` (`InvalidOperator`).
2. Parse strings wrapped in `{` and `}` as JSON and normalize the result.
3. `"true"` / `"false"` (any case) become booleans.
4. Finite decimal numbers become `int` or `float`.
5. ISO 8601 dates become timezone-aware `datetime` objects.
6. Lists are normalized item by item.
7. Mappings are normalized entry by entry, except `dateString` and `$regex`
   entries, which are kept as text for `$dateFromString` and `$regex`.
8. Anything else is returned as is.

Rules 3 and 4 look at the textual form of the value, so a value that is already
a boolean or a number normalizes to itself. A `datetime` is returned as is,
naive or not.
"""

import json
import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from mongo_controller.core.exceptions import InvalidOperator, MalformedStructuredValue

from .datetime_parser import parse_iso8601

NormalizedValue = bool | int | float | datetime | str | list[Any] | dict[str, Any] | None

FORBIDDEN_OPERATORS = ("$function", "$accumulator")
"""Aggregation operators that execute server-side JavaScript."""

LITERAL_KEYS = ("dateString", "$regex")
"""Mapping keys whose values are consumed as literal strings downstream."""

# Decimal number with optional sign, fraction and exponent (no hex, no underscores).
number_re = re.compile(r"^[+-]?(?:\d+(?P<fraction>\.\d*)?|(?P<leading>\.\d+))(?P<exponent>[eE][+-]?\d+)?$")


def textual_form(value: Any) -> str:
    """
    Returns the text a value is inspected as.

    Mappings and sequences are serialized to JSON, booleans and None use their
    JSON spelling, and everything else goes through `str`.
    """
    if isinstance(value, Mapping | list | tuple):
        return json.dumps(value, default=str)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def parse_number(text: str) -> int | float | None:
    """
    Parses `text` as a finite decimal number.

    Returns an `int` when the text has neither a fraction nor an exponent, a
    `float` otherwise, and None when the text is not a number at all.
    """
    text = text.strip()
    match = number_re.match(text)
    if match is None:
        return None

    if match.group("fraction") is None and match.group("leading") is None and match.group("exponent") is None:
        return int(text)

    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def guard_operators(text: str) -> None:
    """Raises `InvalidOperator` when `text` mentions a forbidden operator."""
    for operator in FORBIDDEN_OPERATORS:
        if operator in text:
            raise InvalidOperator(f"invalid operator found: {operator}")


def normalize(value: Any) -> NormalizedValue:
    """
    Infers a typed value from a raw filter or search value.

    Args:
        value (Any): A raw string from a query string, or an already structured
                     value (mapping, list, number, ...).

    Returns:
        NormalizedValue: The typed value.

    Raises:
        InvalidOperator: If the textual form of the value contains `$function`
                         or `$accumulator`, at any depth.
        MalformedStructuredValue: If a string wrapped in `{}` is not valid JSON.
    """
    text = textual_form(value)
    guard_operators(text)

    if isinstance(value, datetime):
        return value

    if isinstance(value, str) and value.startswith("{") and value.endswith("}"):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedStructuredValue(value, e.msg) from e
        return normalize(parsed)

    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    number = parse_number(text)
    if number is not None:
        return number

    parsed_date = parse_iso8601(text)
    if parsed_date is not None:
        return parsed_date

    if isinstance(value, list | tuple):
        return [normalize(item) for item in value]

    if isinstance(value, Mapping):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if key in LITERAL_KEYS:
                # $dateFromString and $regex operands must stay text
                normalized[key] = textual_form(item) if not isinstance(item, str) else item
            else:
                normalized[key] = normalize(item)
        return normalized

    return value
