"""
mongo_controller: a generic CRUD controller for MongoDB collections with a
text-based ad-hoc query language (search, filter, sort, pagination) compiled
into aggregation pipelines.
"""

__version__ = "2.3.0"

from mongo_controller.controller.default import Controller, ControllerOptions, IndexDefinition  # noqa: E402
from mongo_controller.core.exceptions import InvalidOperator, MalformedStructuredValue  # noqa: E402
from mongo_controller.query.builder import AggregateBuilder  # noqa: E402
from mongo_controller.query.normalizer import normalize  # noqa: E402
from mongo_controller.query.tokenizer import find_next_pair  # noqa: E402

__all__ = [
    "AggregateBuilder",
    "Controller",
    "ControllerOptions",
    "IndexDefinition",
    "InvalidOperator",
    "MalformedStructuredValue",
    "find_next_pair",
    "normalize",
]
