from .default import Controller, ControllerOptions, IndexDefinition
from .events import EventEmitter
from .schema import append_basic_schema, append_update_schema

__all__ = [
    "Controller",
    "ControllerOptions",
    "EventEmitter",
    "IndexDefinition",
    "append_basic_schema",
    "append_update_schema",
]
