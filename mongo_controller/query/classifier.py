"""
This module turns search terms and filter strings into `$match` conditions.

Filter pairs are split in two classes by a list of post-match keywords: a pair
whose key contains any of the keywords (plain substring test, so `stat`
matches `status`) belongs to the post class and is applied after the
transformation stages; every other pair belongs to the pre class and is applied
before them, shrinking the input of the expensive stages.
"""

from collections.abc import Sequence
from typing import Any

from .normalizer import normalize
from .tokenizer import FilterPair, iter_pairs


def is_post_key(key: str, post_match_keywords: Sequence[str]) -> bool:
    """True when `key` contains at least one post-match keyword."""
    return any(keyword in key for keyword in post_match_keywords)


def classify_pairs(filter: str, post_match_keywords: Sequence[str], post: bool = False) -> list[FilterPair]:
    """
    Selects the pairs of `filter` belonging to the pre or the post class.

    Args:
        filter (str): A raw filter string, e.g. `"name:bob,age:{"$gt":5}"`.
        post_match_keywords (Sequence[str]): Substrings marking post-class keys.
        post (bool, optional): Select the post class instead of the pre class.
                               Defaults to False.

    Returns:
        list[FilterPair]: The selected pairs, in source order.
    """
    return [pair for pair in iter_pairs(filter) if is_post_key(pair.key, post_match_keywords) is post]


def build_filter_conditions(filter: Any, post_match_keywords: Sequence[str], post: bool = False) -> list[dict[str, Any]]:
    """
    Builds one `{key: normalized_value}` condition per selected pair.

    Non-string filters produce no conditions.
    """
    if not isinstance(filter, str):
        return []
    return [{pair.key: normalize(pair.value)} for pair in classify_pairs(filter, post_match_keywords, post=post)]


def transform_regexp_search(text: Any) -> Any:
    """
    Turns a plain search string into a case-insensitive `$regex` condition.

    Strings that look like a JSON object (starting with `{` or ending with `}`)
    and non-string terms are returned untouched.
    """
    if isinstance(text, str) and not text.startswith("{") and not text.endswith("}"):
        return {"$regex": text, "$options": "i"}
    return text


def build_search_condition(search: Any, search_fields: Sequence[str], auto_regexp_search: bool = True) -> dict[str, Any] | None:
    """
    Builds an `$or` condition matching `search` against every search field.

    Args:
        search (Any): The search term: a string or a mapping (e.g. a raw
                      `{"$in": [...]}` condition).
        search_fields (Sequence[str]): Fields to match the term against.
        auto_regexp_search (bool, optional): Turn plain strings into
            case-insensitive partial matches first. Defaults to True.

    Returns:
        dict[str, Any] | None: `{"$or": [...]}`, or None when there is no term or
                               no field to search.
    """
    if not isinstance(search, str | dict) or not search or len(search_fields) == 0:
        return None

    if auto_regexp_search:
        search = transform_regexp_search(search)

    return {"$or": [{field: normalize(search)} for field in search_fields]}
