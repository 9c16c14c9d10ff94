"""
Helpers for telling MongoDB update queries apart from plain documents.

Controller update methods accept either a plain partial document, which is
wrapped in `$set`, or a full update query such as `{"$inc": {"count": 1}}`.
"""

from typing import Any

UPDATE_OPERATORS = frozenset(
    {
        "$currentDate",
        "$inc",
        "$min",
        "$max",
        "$mul",
        "$rename",
        "$set",
        "$setOnInsert",
        "$unset",
        "$addToSet",
        "$pop",
        "$pull",
        "$push",
        "$pushAll",
        "$bit",
    }
)


def is_update_query(docs: dict[str, Any]) -> bool:
    """True when any top-level key of `docs` is an update operator."""
    return any(key in UPDATE_OPERATORS for key in docs)


def retrieve_update_query_data(docs: dict[str, Any]) -> dict[str, Any]:
    """Returns the `$set` payload of an update query, or a copy of a plain document."""
    if is_update_query(docs):
        return dict(docs.get("$set") or {})
    return dict(docs)


def merge_update_query_data(source: dict[str, Any], target: dict[str, Any]) -> dict[str, Any]:
    """
    Merges two documents or update queries into a single update query.

    The operators of both inputs are kept (`target` wins on conflicts) and the
    `$set` payload is the union of both documents' data, `target` winning.
    """
    data = {**retrieve_update_query_data(source), **retrieve_update_query_data(target)}
    result: dict[str, Any] = {}
    if is_update_query(source):
        result.update(source)
    if is_update_query(target):
        result.update(target)
    return {**result, "$set": data}
