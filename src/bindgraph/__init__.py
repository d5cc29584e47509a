"""Conversion-code generator for bridging a dynamic scripting runtime and a typed host library."""

__all__ = [
    "Artifact",
    "AssembledCode",
    "CalcNode",
    "CanConvert",
    "CatalogCalculator",
    "CatalogError",
    "ConversionError",
    "ConversionGraph",
    "ConverterError",
    "ConverterSet",
    "Direction",
    "InvariantViolationError",
    "Key",
    "Node",
    "Request",
    "TypeCatalog",
    "assemble",
    "build_graph",
    "converter_error",
    "converter_name",
    "generate_dot",
    "import_alias",
    "load_catalog",
]

from ._assemble import AssembledCode, assemble, import_alias
from ._catalog import CatalogCalculator, CatalogError, TypeCatalog, converter_name, load_catalog
from ._converter_set import ConverterSet
from ._errors import ConverterError, converter_error
from ._graph import (
    Artifact,
    CalcNode,
    CanConvert,
    ConversionError,
    ConversionGraph,
    InvariantViolationError,
    Node,
    build_graph,
    generate_dot,
)
from ._key import Direction, Key, Request
