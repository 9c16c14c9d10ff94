"""
This module defines the exceptions raised by the query compiler and the
controller layer.

The compiler raises synchronously and never retries: a failure aborts the
whole compile call and surfaces to the controller method that requested it,
and from there to the API boundary.
"""


class InvalidOperator(ValueError):
    """
    Raised by the value normalizer when a forbidden query operator is found.

    `$function` and `$accumulator` allow arbitrary server-side JavaScript in
    MongoDB aggregation pipelines, so any value whose textual form contains
    them is rejected before it can be embedded into a stage.
    """

    def __init__(self, message: str = "invalid operator found"):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"{self.message}"


class MalformedStructuredValue(ValueError):
    """Raised when a value wrapped in `{` and `}` cannot be parsed as JSON."""

    def __init__(self, value: str, reason: str | None = None):
        self.value = value
        self.reason = reason
        message = f"unable to parse structured value {value!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CollectionRequired(TypeError):
    """Raised when a controller is created without a collection."""

    def __init__(self, received: object = None):
        super().__init__(f'collection expected to be an object, but received "{type(received).__name__}"')


class NoEntryFound(Exception):
    """
    This exception is raised when a caller tries to access a document that does not exist.
    """

    pass


def registered_exceptions() -> dict:
    """Returns a dictionary of registered exceptions and their default messages."""
    return {
        InvalidOperator: "The query contains an operator that is not allowed",
        MalformedStructuredValue: "The query contains a value that could not be parsed",
        NoEntryFound: "The requested document was not found",
    }
