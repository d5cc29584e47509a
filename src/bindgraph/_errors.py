"""Aggregate report of the artifacts that could not be generated."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._graph import ConversionError, ConversionGraph
    from ._key import Key


class ConverterError(Exception):
    """One or more conversion artifacts could not be generated.

    The graph the error was created from is still usable: every artifact
    that does not depend on a failed one was generated.

    Attributes:
        errors: Every error origin with its failure, sorted by key.

    """

    def __init__(self, errors: list[tuple[Key, ConversionError]], valid_keys: frozenset[Key]) -> None:
        if not errors:
            msg = "ConverterError requires at least one error"
            raise ValueError(msg)
        self.errors = sorted(errors, key=lambda item: item[0])
        self._valid_keys = valid_keys
        super().__init__(self.summary())

    @classmethod
    def from_graph(cls, graph: ConversionGraph) -> ConverterError | None:
        """Create the error for a graph, or return None if the graph has no errors."""
        if not graph.has_errors:
            return None
        return cls(graph.sorted_errors(), frozenset(graph.nodes))

    @staticmethod
    def format_entry(key: Key, error: ConversionError) -> str:
        """Format a single failing artifact."""
        return f"convert {key.description} {key.direction.human}: {error.reason}"

    def summary(self) -> str:
        """Return a short single-line message naming the first failure."""
        first_key, first_error = self.errors[0]
        return f"{len(self.errors)} converter errors, first: {self.format_entry(first_key, first_error)}"

    def report(self) -> str:
        """Return a multi-line message listing every failure."""
        return "".join(f"{self.format_entry(key, error)}\n" for key, error in self.errors)

    def is_usable(self, key: Key) -> bool:
        """Check whether the artifact for ``key`` was still generated."""
        return key in self._valid_keys

    @property
    def causes(self) -> list[ConversionError]:
        """The underlying conversion errors, sorted by key."""
        return [error for _, error in self.errors]


def converter_error(graph: ConversionGraph) -> ConverterError | None:
    """Return the aggregate error of a graph, or None if it has no error origins."""
    return ConverterError.from_graph(graph)
