"""Nodes and the immutable result of a graph build."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from bindgraph._key import Direction, Key, Request


class ConversionError(Exception):
    """Raised by an artifact calculator when an artifact cannot be generated.

    This is an expected, data-dependent outcome (an internal-only type, a
    generic type parameter, an unsupported shape, ...). It is recorded
    against the failing key and only affects the artifacts depending on it.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class InvariantViolationError(RuntimeError):
    """Internal consistency failure of the graph builder."""


@dataclass(frozen=True, slots=True)
class Artifact:
    """Successful output of an artifact calculator.

    Attributes:
        code: Generated conversion code.
        deps: Further artifacts this one calls into.
        resources: External resource paths (imports) the code needs.

    """

    code: str = ""
    deps: tuple[Request, ...] = ()
    resources: tuple[str, ...] = ()


CanConvert: TypeAlias = Callable[[Request], bool]
CalcNode: TypeAlias = Callable[[Request, CanConvert], Artifact]


@dataclass(frozen=True, slots=True)
class Node:
    """The computed outcome for one key.

    Attributes:
        key: The artifact this node belongs to.
        code: Generated code. Empty for error nodes.
        deps: Requests for the artifacts this node depends on, without
            self-references.
        resources: External resource paths needed by ``code``.
        error: Why the calculation failed, if it did.
        incomplete: Whether this node, or anything it depends on, failed.
        debug_labels: Labels of every request made for this key.

    """

    key: Key
    code: str = ""
    deps: tuple[Request, ...] = ()
    resources: tuple[str, ...] = ()
    error: ConversionError | None = None
    incomplete: bool = False
    debug_labels: tuple[str, ...] = ()

    @property
    def dep_keys(self) -> tuple[Key, ...]:
        """Keys of the dependencies, in request order."""
        return tuple(dep.key for dep in self.deps)


@dataclass(frozen=True, slots=True)
class ConversionGraph:
    """Result of building a conversion graph.

    Attributes:
        nodes: Valid nodes only. Every one of them is reachable from a seed
            through valid nodes, has no error and is not incomplete.
        errors: Keys whose own calculation failed, mapped to the failure.
        debug_nodes: Every calculated node, including incomplete and error
            nodes. Meant for diagnostics and tests.
        seeds: The requests the build started from.

    """

    nodes: Mapping[Key, Node] = field(default_factory=dict)
    errors: Mapping[Key, ConversionError] = field(default_factory=dict)
    debug_nodes: Mapping[Key, Node] = field(default_factory=dict)
    seeds: tuple[Request, ...] = ()

    def __contains__(self, key: object) -> bool:
        """Check whether a key made it into the valid node set."""
        return key in self.nodes

    def __len__(self) -> int:
        """Return the number of valid nodes."""
        return len(self.nodes)

    def contains(self, description: str, direction: Direction = Direction.TO_DYNAMIC) -> bool:
        """Check whether the artifact for a type and direction is valid."""
        return Key(description, direction) in self.nodes

    @property
    def has_errors(self) -> bool:
        """Whether any artifact calculation failed."""
        return len(self.errors) > 0

    def sorted_nodes(self) -> list[Node]:
        """Return the valid nodes sorted by key."""
        return [self.nodes[key] for key in sorted(self.nodes)]

    def sorted_errors(self) -> list[tuple[Key, ConversionError]]:
        """Return the error origins sorted by key."""
        return [(key, self.errors[key]) for key in sorted(self.errors)]

    def incomplete_keys(self) -> list[Key]:
        """Return the sorted keys of every incomplete node, error origins included."""
        return sorted(key for key, node in self.debug_nodes.items() if node.incomplete)
