# src/dcsim_core/parser/__init__.py
from .raw_data import ParsedCircuitDocument, ParsedComponentData
from .parser import NetlistParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    # IR Data Structures
    "ParsedCircuitDocument",
    "ParsedComponentData",
    # Parser and Exceptions
    "NetlistParser",
    "ParsingError",
    "SchemaValidationError",
]
