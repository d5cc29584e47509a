"""Assembly of the generated conversion code into a single output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._graph import ConversionGraph

logger = logging.getLogger(__name__)

_IMPORT_ALIAS_TABLE = str.maketrans({"/": "_", ".": "_", "-": "_"})


def import_alias(path: str) -> str:
    """Return the identifier a resource path is imported as.

    Example:
        >>> import_alias("example.com/geo-utils")
        'example_com_geo_utils'

    """
    return path.translate(_IMPORT_ALIAS_TABLE)


@dataclass(frozen=True, slots=True)
class AssembledCode:
    """Generated code of every valid artifact, ready to be written out.

    Attributes:
        imports: Deduplicated, sorted resource paths.
        sections: Code of each valid artifact, in key order.
        prelude: Text placed between the imports and the converters.

    """

    imports: tuple[str, ...] = ()
    sections: tuple[str, ...] = ()
    prelude: str = ""

    def render(self) -> str:
        """Render the import block, the prelude and every converter."""
        parts: list[str] = []
        if self.imports:
            lines = "".join(f'\t{import_alias(path)} "{path}"\n' for path in self.imports)
            parts.append(f"import (\n{lines})\n")
        if self.prelude:
            parts.append(self.prelude.rstrip("\n") + "\n")
        if self.sections:
            parts.append("\n\n".join(section.rstrip("\n") for section in self.sections) + "\n")
        return "\n".join(parts)


def assemble(graph: ConversionGraph, base_package: str | None = None, prelude: str = "") -> AssembledCode:
    """Collect the code and resource paths of every valid node.

    Args:
        graph: The built graph. Only its valid nodes are used.
        base_package: Resource path of the package the code is generated
            into. It is never imported.
        prelude: Text to place before the converters.

    Returns:
        The assembled code.

    """
    imports: set[str] = set()
    sections: list[str] = []
    for node in graph.sorted_nodes():
        imports.update(path for path in node.resources if path != base_package)
        if node.code:
            sections.append(node.code)

    logger.debug("Assembled %d converters with %d imports", len(sections), len(imports))
    return AssembledCode(imports=tuple(sorted(imports)), sections=tuple(sections), prelude=prelude)
