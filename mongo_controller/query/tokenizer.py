"""
This module scans filter strings of the form `key1:value1,key2:value2,`.

Keys may only contain letters, digits, `.` and `$`; any other character met
while reading a key is dropped. Values run until the next comma that is not
nested inside `{...}` or `[...]`, so a value may itself be a JSON fragment such
as `{"$gte":5}` or `[1,2,3]`.
"""

import string
from collections.abc import Iterator
from typing import NamedTuple

NESTED_START = "{["
NESTED_END = "}]"
KEY_ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits + ".$")
KEY_DELIMITER = ":"
PAIR_DELIMITER = ","


class FilterPair(NamedTuple):
    """
    A single `key:value` pair scanned from a filter string.

    `end_index` is one past the terminating comma, i.e. the `start_index` of
    the next pair. It is 0 when the scan reached the end of the text without
    finding a terminating comma at nesting depth 0.
    """

    start_index: int
    end_index: int
    key: str
    value: str

    @property
    def is_empty(self) -> bool:
        """True when nothing was scanned: there are no more pairs."""
        return self.key == "" and self.value == ""


def find_next_pair(text: str, start_index: int = 0) -> FilterPair:
    """
    Scans `text` from `start_index` for the next `key:value` pair.

    Never raises. Malformed input (missing `:`, unbalanced brackets, missing
    trailing comma) yields a pair with `end_index == 0` holding whatever was
    accumulated, or an empty pair when nothing was.

    Args:
        text (str): The filter string.
        start_index (int, optional): Where to start scanning. Defaults to 0.

    Returns:
        FilterPair: The scanned pair and its span.
    """
    key: list[str] = []
    value: list[str] = []
    end_index = 0
    found_key = False
    nested = 0

    for index in range(start_index, len(text)):
        char = text[index]
        if not found_key:
            if char in KEY_ALLOWED_CHARACTERS:
                key.append(char)
            elif char == KEY_DELIMITER:
                found_key = True
            continue

        if char in NESTED_START:
            nested += 1
        elif char in NESTED_END:
            nested -= 1

        if nested == 0 and char == PAIR_DELIMITER:
            end_index = index + 1
            break
        value.append(char)

    return FilterPair(start_index, end_index, "".join(key), "".join(value))


def iter_pairs(text: str) -> Iterator[FilterPair]:
    """
    Yields every complete pair of a filter string, in order.

    A trailing comma is appended when missing so the last pair terminates.
    Iteration stops at the first empty pair, and also at the first pair that
    could not be terminated (unbalanced brackets): that pair is not yielded.
    """
    if not text.endswith(PAIR_DELIMITER):
        text += PAIR_DELIMITER

    index = 0
    while index < len(text):
        pair = find_next_pair(text, index)
        if pair.is_empty or pair.end_index == 0:
            break
        yield pair
        index = pair.end_index
