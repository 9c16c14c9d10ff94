"""
This module builds a FastAPI router exposing a `Controller` over HTTP.

Routes (relative to the router prefix):

- `GET /` search with `search`, `filter`, `sort`, `page` and `pageSize`
- `GET /count` count with `search` and `filter`
- `GET /{item_id}` read one document
- `POST /` insert one document
- `PUT /{item_id}` update one document
- `DELETE /{item_id}` delete one document
"""

from enum import Enum
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from mongo_controller.controller import Controller
from mongo_controller.schemas.response.query import SearchQuery
from mongo_controller.schemas.response.responses import CountResponse

from ._base import HttpController


def get_search_query(
    search: str | None = None,
    filter: str | None = None,
    sort: str | None = None,
    page: int | None = None,
    page_size: int | None = Query(default=None, alias="pageSize", gt=0),
) -> SearchQuery:
    """Collects the query-language parameters of a request."""
    return SearchQuery(search=search, filter=filter, sort=sort, page=page, page_size=page_size)


def controller_router(controller: Controller, prefix: str = "", tags: list[str | Enum] | None = None) -> APIRouter:
    """
    Creates an `APIRouter` exposing CRUD and search for `controller`.

    Args:
        controller (Controller): The controller to expose.
        prefix (str, optional): URL prefix, e.g. `/users`. Defaults to "".
        tags (list[str | Enum] | None, optional): OpenAPI tags. Defaults to the
            collection name.

    Returns:
        APIRouter: The router, ready for `app.include_router`.
    """
    router = APIRouter(prefix=prefix, tags=tags or [controller.collection_name])
    http = HttpController(controller, controller.logger)
    # an empty prefix needs an explicit root path
    root = "" if prefix else "/"

    @router.get(root)
    def search_documents(q: SearchQuery = Depends(get_search_query)) -> list[Any]:
        return http.search(q)

    @router.get("/count", response_model=CountResponse)
    def count_documents(q: SearchQuery = Depends(get_search_query)) -> CountResponse:
        return CountResponse(count=http.count(q))

    @router.get("/{item_id}")
    def get_document(item_id: str) -> Any:
        return http.get_one(item_id)

    @router.post(root, status_code=status.HTTP_201_CREATED)
    def create_document(data: dict[str, Any] = Body(...)) -> Any:
        return http.create_one(data)

    @router.put("/{item_id}")
    def update_document(item_id: str, data: dict[str, Any] = Body(...)) -> Any:
        return http.update_one(item_id, data)

    @router.delete("/{item_id}")
    def delete_document(item_id: str) -> Any:
        return http.delete_one(item_id)

    return router
