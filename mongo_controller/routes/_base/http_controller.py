"""
This module provides the `HttpController` class, which wraps a `Controller`
with HTTP semantics.

It standardizes exception handling by converting query-compilation and store
errors into FastAPI `HTTPException` responses, and encodes documents (which may
carry `ObjectId` and `datetime` values) into JSON-compatible data.
"""

from collections.abc import Callable
from logging import Logger
from typing import Any

from bson import ObjectId
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder

from mongo_controller.controller import Controller
from mongo_controller.core.exceptions import InvalidOperator, MalformedStructuredValue, NoEntryFound, registered_exceptions
from mongo_controller.schemas.response.query import SearchQuery
from mongo_controller.schemas.response.responses import ErrorResponse


def encode_documents(data: Any) -> Any:
    """Encodes documents for a JSON response, rendering `ObjectId` as text."""
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


class HttpController:
    """
    HTTP helper around a `Controller`.

    Intended usage is via composition within a router factory:
    ```python
    http = HttpController(controller, controller.logger)
    router.get("/")(lambda q=Depends(get_search_query): http.search(q))
    ```
    """

    controller: Controller
    """The controller performing the operations."""

    exception_msgs: Callable[[type[Exception]], str | None] | None
    """
    An optional callable that takes an exception type and returns a custom
    user-friendly error message string for that exception type.
    """

    default_message: str = "An unexpected error occurred processing your request."
    """Default error message if a specific one is not found or provided."""

    logger: Logger

    def __init__(
        self,
        controller: Controller,
        logger: Logger,
        exception_msgs: Callable[[type[Exception]], str | None] | None = None,
        default_message: str | None = None,
    ) -> None:
        self.controller = controller
        self.logger = logger
        self.exception_msgs = exception_msgs or registered_exceptions().get

        if default_message:
            self.default_message = default_message

    def get_exception_message(self, ex: Exception) -> str:
        """
        Gets a user-friendly message for a given exception.

        Falls back to `self.default_message` when no message is registered for
        the type of `ex`.
        """
        if self.exception_msgs:
            custom_msg = self.exception_msgs(type(ex))
            if custom_msg:
                return custom_msg
        return self.default_message

    def handle_exception(self, ex: Exception) -> None:
        """
        Logs `ex` and raises the matching `HTTPException`.

        Query errors (`InvalidOperator`, `MalformedStructuredValue`) are client
        errors (400), `NoEntryFound` is a 404, anything else is a 500.

        Raises:
            HTTPException: Always.
        """
        msg = self.get_exception_message(ex)

        if isinstance(ex, InvalidOperator | MalformedStructuredValue):
            self.logger.warning(f"Rejected query on {self.controller.collection_name}: {ex}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=ErrorResponse.respond(message=msg, exception=str(ex)),
            ) from ex

        if isinstance(ex, NoEntryFound):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=ErrorResponse.respond(message=msg, exception=str(ex)),
            ) from ex

        self.logger.exception(ex)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorResponse.respond(message=msg, exception=str(ex)),
        ) from ex

    def _require(self, item: Any, item_id: str) -> Any:
        if item is None:
            raise NoEntryFound(f"{self.controller.collection_name} with id '{item_id}' not found")
        return item

    def search(self, q: SearchQuery) -> list[Any]:
        try:
            items = self.controller.search(q.search or None, q.filter, q.sort, q.page, q.page_size)
        except Exception as ex:
            self.handle_exception(ex)
            raise
        return encode_documents(items)

    def count(self, q: SearchQuery) -> int:
        try:
            return self.controller.count(q.search or None, q.filter)
        except Exception as ex:
            self.handle_exception(ex)
            raise

    def get_one(self, item_id: str) -> Any:
        try:
            item = self._require(self.controller.find_by_id(item_id), item_id)
        except Exception as ex:
            self.handle_exception(ex)
            raise
        return encode_documents(item)

    def create_one(self, data: dict[str, Any]) -> Any:
        try:
            item = self.controller.insert_one(data)
        except Exception as ex:
            self.handle_exception(ex)
            raise
        return encode_documents(item)

    def update_one(self, item_id: str, data: dict[str, Any]) -> Any:
        try:
            self._require(self.controller.find_by_id(item_id), item_id)
            item = self.controller.update_by_id(item_id, data)
        except Exception as ex:
            self.handle_exception(ex)
            raise
        return encode_documents(item)

    def delete_one(self, item_id: str) -> Any:
        try:
            item = self._require(self.controller.delete_by_id(item_id), item_id)
        except Exception as ex:
            self.handle_exception(ex)
            raise
        self.logger.info(f"Successfully deleted item with id {item_id}")
        return encode_documents(item)
