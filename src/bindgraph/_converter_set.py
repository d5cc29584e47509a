"""Collection of requested converters and generation of their code."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Self

from ._assemble import assemble
from ._catalog import CatalogCalculator, converter_name
from ._errors import ConverterError
from ._graph import build_graph, generate_dot
from ._key import Direction, Key, Request

if TYPE_CHECKING:
    import re

    from ._catalog import TypeCatalog
    from ._graph import CalcNode, ConversionGraph

logger = logging.getLogger(__name__)


class ConverterSet:
    """The set of converters generated code must provide.

    Converters are added as seeds. Building the set calculates every
    converter they need; converters that cannot be generated are left out
    together with everything depending on them.
    """

    def __init__(self, calc_node: CalcNode, base_package: str | None = None, prelude: str = "") -> None:
        self._calc_node = calc_node
        self._seeds: dict[Key, Request] = {}
        self.base_package = base_package
        self.prelude = prelude

    @classmethod
    def from_catalog(cls, catalog: TypeCatalog) -> Self:
        """Create a set calculating artifacts from ``catalog``, seeded with its seeds."""
        converters = cls(
            CatalogCalculator(catalog),
            base_package=catalog.settings.base_package,
            prelude=catalog.settings.prelude,
        )
        for seed in catalog.seeds:
            converters.add(seed.type_name, seed.direction, seed.label)
        return converters

    def add(
        self,
        description: str,
        direction: Direction = Direction.TO_DYNAMIC,
        debug_label: str | None = None,
    ) -> str:
        """Request a converter for a type.

        Adding the same type and direction again only adds the debug label.

        Args:
            description: Description of the host type.
            direction: Which way to convert.
            debug_label: Who needs the converter. Used in diagnostics only.

        Returns:
            The name of the converter function.

        """
        key = Key(description, direction)
        labels = self._seeds[key].debug_labels if key in self._seeds else ()
        if debug_label:
            labels = (*labels, debug_label)
        self._seeds[key] = Request(key, labels)
        return converter_name(description, direction)

    def seeds(self) -> list[Request]:
        """Return the requested converters sorted by key."""
        return [self._seeds[key] for key in sorted(self._seeds)]

    def build(self) -> ConversionGraph:
        """Build the conversion graph of the requested converters."""
        logger.debug("Building conversion graph for %d seeds", len(self._seeds))
        return build_graph(self.seeds(), self._calc_node)

    def code(self) -> tuple[str, ConverterError | None]:
        """Generate the code of every converter that could be generated.

        Returns:
            The generated code and, if any converter failed, the aggregate
            error. The code is valid either way; it just lacks the failed
            converters and everything depending on them.

        """
        graph = self.build()
        assembled = assemble(graph, base_package=self.base_package, prelude=self.prelude)
        return assembled.render(), ConverterError.from_graph(graph)

    def dot(self, pattern: str | re.Pattern[str] | None = None) -> str:
        """Return Graphviz DOT code of the complete converter graph."""
        return generate_dot(self.build(), pattern)
