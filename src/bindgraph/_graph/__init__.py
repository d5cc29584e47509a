"""Graph module building the dependency graph of conversion artifacts.

This module contains:
- build_graph: Memoized, failure-tolerant graph construction
- ConversionGraph / Node: The immutable build result
- generate_dot: Graphviz export of the unpruned graph
"""

from ._builder import build_graph
from ._dot import generate_dot
from ._node import (
    Artifact,
    CalcNode,
    CanConvert,
    ConversionError,
    ConversionGraph,
    InvariantViolationError,
    Node,
)

__all__ = [
    "Artifact",
    "CalcNode",
    "CanConvert",
    "ConversionError",
    "ConversionGraph",
    "InvariantViolationError",
    "Node",
    "build_graph",
    "generate_dot",
]
