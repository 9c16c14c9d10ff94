"""
Stamps the bookkeeping fields every controller-managed document carries.

Documents are identified by a string `id` (a UUID4) rather than by MongoDB's
`_id`, and carry `createdAt` / `updatedAt` timestamps in UTC.
"""

from datetime import UTC, datetime
from typing import Any, overload
from uuid import uuid4

from mongo_controller.query.update import is_update_query


def _stamp(doc: dict[str, Any], now: datetime) -> dict[str, Any]:
    return {**doc, "id": doc.get("id") or str(uuid4()), "createdAt": now, "updatedAt": now}


@overload
def append_basic_schema(docs: dict[str, Any], now: datetime | None = None) -> dict[str, Any]: ...


@overload
def append_basic_schema(docs: list[dict[str, Any]], now: datetime | None = None) -> list[dict[str, Any]]: ...


def append_basic_schema(docs, now=None):
    """
    Returns copies of `docs` with `id`, `createdAt` and `updatedAt` set.

    An existing `id` is kept. All documents of one call share the same
    timestamp.
    """
    now = now or datetime.now(tz=UTC)
    if isinstance(docs, list):
        return [_stamp(doc, now) for doc in docs]
    return _stamp(docs, now)


def append_update_schema(docs: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """
    Returns a copy of `docs` with `updatedAt` set.

    For update queries the timestamp goes into `$set`, creating it if needed.
    """
    now = now or datetime.now(tz=UTC)
    if is_update_query(docs):
        return {**docs, "$set": {**(docs.get("$set") or {}), "updatedAt": now}}
    return {**docs, "updatedAt": now}
