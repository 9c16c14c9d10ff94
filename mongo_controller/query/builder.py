"""
This module provides the ordered stage sequence the pipeline compiler writes to.

`StageSequence` is the interface the compiler relies on: it only ever appends
opaque stage values and concatenates sequences. `AggregateBuilder` implements it
for MongoDB aggregation pipelines, where each stage is a single-key dict such as
`{"$match": {...}}`, and adds helpers for the common stage types.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, Self

Stage = dict[str, Any]


class StageSequence(Protocol):
    """An ordered, appendable and concatenable sequence of pipeline stages."""

    def append(self, stage: Stage) -> Self: ...

    def concat(self, other: StageSequence) -> Self: ...

    def to_list(self) -> list[Stage]: ...


class AggregateBuilder:
    """
    Accumulates MongoDB aggregation stages in order.

    Every method returns the builder itself so calls can be chained:

    ```python
    pipeline = AggregateBuilder().match({"status": "active"}).sort({"createdAt": -1}).to_list()
    ```
    """

    def __init__(self, stages: list[Stage] | None = None) -> None:
        self._stages: list[Stage] = list(stages or [])

    def append(self, stage: Stage) -> Self:
        self._stages.append(stage)
        return self

    def concat(self, other: StageSequence) -> Self:
        """Appends every stage of `other`, keeping their order."""
        self._stages.extend(other.to_list())
        return self

    def match(self, condition: dict[str, Any]) -> Self:
        return self.append({"$match": condition})

    def sort(self, order: dict[str, int]) -> Self:
        return self.append({"$sort": order})

    def skip(self, count: int) -> Self:
        return self.append({"$skip": count})

    def limit(self, count: int) -> Self:
        return self.append({"$limit": count})

    def project(self, projection: dict[str, Any]) -> Self:
        return self.append({"$project": projection})

    def add_fields(self, fields: dict[str, Any]) -> Self:
        return self.append({"$addFields": fields})

    def lookup(self, from_: str, local_field: str, foreign_field: str, as_: str) -> Self:
        return self.append(
            {
                "$lookup": {
                    "from": from_,
                    "localField": local_field,
                    "foreignField": foreign_field,
                    "as": as_,
                }
            }
        )

    def unwind(self, path: str, preserve_null_and_empty_arrays: bool = False) -> Self:
        return self.append({"$unwind": {"path": path, "preserveNullAndEmptyArrays": preserve_null_and_empty_arrays}})

    def group(self, spec: dict[str, Any]) -> Self:
        return self.append({"$group": spec})

    def to_list(self) -> list[Stage]:
        """Returns a copy of the stages, ready for `Collection.aggregate`."""
        return list(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AggregateBuilder):
            return self._stages == other._stages
        return NotImplemented

    def __repr__(self) -> str:
        return f"AggregateBuilder({self._stages!r})"
