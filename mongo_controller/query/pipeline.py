"""
This module assembles search, filter, sort and pagination input into one
MongoDB aggregation pipeline.

The stages are always emitted in this order:

1. pre-query `$match` (search condition and pre-class filter pairs),
2. the caller's transformation stages,
3. `$sort`,
4. `$limit` then `$skip`,
5. post-query `$match` (post-class filter pairs).

Filtering before the transformation stages keeps their input small; filters on
fields that only exist after the transformation are deferred to the post query.
Every function here is pure and allocates a fresh builder per call.
"""

from collections.abc import Sequence
from typing import Any

from .builder import AggregateBuilder, StageSequence
from .classifier import build_filter_conditions, build_search_condition


def compute_pre_query(
    search: Any = None,
    filter: Any = None,
    search_fields: Sequence[str] = (),
    post_match_keywords: Sequence[str] = (),
    auto_regexp_search: bool = True,
) -> AggregateBuilder:
    """
    Builds the `$match` stage applied before the transformation stages.

    The search condition and every pre-class filter condition are combined with
    `$and`. When nothing contributes the stage matches `{}` (every document).

    Returns:
        AggregateBuilder: A builder holding exactly one `$match` stage.
    """
    conditions: list[dict[str, Any]] = []

    search_condition = build_search_condition(search, search_fields, auto_regexp_search)
    if search_condition is not None:
        conditions.append(search_condition)

    conditions.extend(build_filter_conditions(filter, post_match_keywords, post=False))

    match: dict[str, Any] = {}
    if conditions:
        match["$and"] = conditions
    return AggregateBuilder().match(match)


def compute_post_query(filter: Any = None, post_match_keywords: Sequence[str] = ()) -> AggregateBuilder | None:
    """
    Builds the `$match` stage applied after the transformation stages.

    Returns:
        AggregateBuilder | None: A builder holding one `$match` stage, or None
                                 when no filter pair has a post-match key.
    """
    conditions = build_filter_conditions(filter, post_match_keywords, post=True)
    if not conditions:
        return None
    return AggregateBuilder().match({"$and": conditions})


def parse_sort(sort: str) -> dict[str, int]:
    """
    Parses `+field,-field` into `{field: 1, field: -1}`, keeping the given order.

    Blank entries are skipped; a field listed twice keeps its first position
    and its last direction.
    """
    order: dict[str, int] = {}
    for term in sort.split(","):
        term = term.strip()
        direction = 1
        if term.startswith("-"):
            direction = -1
            term = term[1:]
        elif term.startswith("+"):
            term = term[1:]
        key = term.strip()
        if key:
            order[key] = direction
    return order


def compute_sort(sort: str | None = None) -> AggregateBuilder | None:
    """
    Builds the `$sort` stage.

    Returns:
        AggregateBuilder | None: A builder holding one `$sort` stage, or None
                                 when `sort` is absent or names no field.
    """
    if not isinstance(sort, str):
        return None
    order = parse_sort(sort)
    if not order:
        return None
    return AggregateBuilder().sort(order)


def compute_option(page: int | None = None, page_size: int | None = None) -> AggregateBuilder | None:
    """
    Builds the pagination stages.

    `$limit` is an absolute cutoff of `page_size + skip` documents counted from
    the start, and the following `$skip` drops the earlier pages, leaving
    exactly `page_size` documents. Pages below 1 are treated as page 1.

    Returns:
        AggregateBuilder | None: A builder holding `$limit` then `$skip`, or None
                                 unless both `page` and `page_size` are given.
    """
    if page is None or page_size is None:
        return None
    skip = (page - 1) * page_size if page > 0 else 0
    return AggregateBuilder().limit(page_size + skip).skip(skip)


def compute_pipeline(
    search: Any = None,
    filter: Any = None,
    sort: str | None = None,
    page: int | None = None,
    page_size: int | None = None,
    *,
    transform: StageSequence | None = None,
    search_fields: Sequence[str] = (),
    post_match_keywords: Sequence[str] = (),
    auto_regexp_search: bool = True,
) -> AggregateBuilder:
    """
    Compiles search, filter, sort and pagination input into one pipeline.

    Args:
        search (Any, optional): Free-text search term or raw condition.
        filter (Any, optional): Filter string `key:value,key:value`.
        sort (str | None, optional): Sort string `+field,-field`.
        page (int | None, optional): 1-based page number.
        page_size (int | None, optional): Documents per page.
        transform (StageSequence | None, optional): Stages spliced in between
            the pre query and the sort stage.
        search_fields (Sequence[str], optional): Fields searched by `search`.
        post_match_keywords (Sequence[str], optional): Substrings of filter keys
            that must be matched after `transform`.
        auto_regexp_search (bool, optional): Search plain strings as
            case-insensitive regular expressions. Defaults to True.

    Returns:
        AggregateBuilder: The assembled pipeline.

    Raises:
        InvalidOperator: If any value contains `$function` or `$accumulator`.
        MalformedStructuredValue: If a `{...}` value is not valid JSON.
    """
    builder = compute_pre_query(search, filter, search_fields, post_match_keywords, auto_regexp_search)
    if transform is not None:
        builder.concat(transform)

    for stage in (compute_sort(sort), compute_option(page, page_size), compute_post_query(filter, post_match_keywords)):
        if stage is not None:
            builder.concat(stage)
    return builder
