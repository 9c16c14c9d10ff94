"""
This module defines standardized Pydantic response schemas for API feedback.

Each model includes a `respond` class method as a convenient way to construct
and serialize the response, particularly useful when providing detail payloads
for FastAPI's `HTTPException`.
"""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    Standardized schema for API error responses.
    Provides a user-friendly message, an error flag, and optional exception details.
    """

    message: str
    """A human-readable message describing the error."""
    error: bool = True
    """A boolean flag indicating that this is an error response. Defaults to True."""
    exception: str | None = None
    """Optional string representation of the exception that occurred, useful for debugging."""

    @classmethod
    def respond(cls, message: str, exception: str | None = None) -> dict[str, Any]:
        """
        Helper method to create an `ErrorResponse` instance and return its dictionary
        representation, for use as the `detail` of an `HTTPException`.

        Args:
            message (str): The error message.
            exception (str | None, optional): Optional string representation of the exception.
                                              Defaults to None.

        Returns:
            dict[str, Any]: A dictionary representing the error response.
        """
        return cls(message=message, exception=exception).model_dump()


class CountResponse(BaseModel):
    """Response of the count endpoint."""

    count: int
