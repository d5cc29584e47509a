"""Artifact calculator backed by a type catalog."""

from __future__ import annotations

import logging
from string import Template
from typing import TYPE_CHECKING

from bindgraph._graph import Artifact, ConversionError
from bindgraph._key import Request

from ._naming import converter_name

if TYPE_CHECKING:
    from bindgraph._graph import CanConvert

    from ._models import TypeCatalog, TypeEntry

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = Template(
    """\
// $name converts $type ($direction).
func $name(v any) any {
	return convert(v, []any{$fields})
}""",
)

LEAF_TEMPLATE = Template(
    """\
// $name converts $type ($direction).
func $name(v any) any {
	return convertBasic[$type](v)
}""",
)


class CatalogCalculator:
    """Calculates conversion artifacts from the entries of a type catalog.

    Types listed as primitives are leaves. Every other type must have a
    catalog entry; its fields become the artifact's dependencies. Optional
    fields are only used if they can be converted, otherwise their fallback
    text is used in their place.
    """

    def __init__(self, catalog: TypeCatalog) -> None:
        self.catalog = catalog
        self._primitives = frozenset(catalog.settings.primitives)

    def __call__(self, request: Request, can_convert: CanConvert) -> Artifact:
        """Calculate the artifact for ``request``.

        Raises:
            ConversionError: If the type cannot be converted in the requested
                direction.

        """
        description = request.key.description
        direction = request.key.direction

        entry = self.catalog.types.get(description)
        if entry is None:
            if description in self._primitives:
                return Artifact(code=self._render(LEAF_TEMPLATE, request, deps=(), fields=()))
            msg = f"no known converter template for type {description}"
            raise ConversionError(msg)

        if entry.unsupported is not None:
            raise ConversionError(entry.unsupported.reason)
        if entry.error is not None:
            raise ConversionError(entry.error)
        if direction not in entry.directions:
            msg = f"no template to convert {description} {direction}"
            raise ConversionError(msg)

        deps: list[Request] = []
        fields: list[str] = []
        for field in entry.members:
            dep = Request.of(field.type_name, field.target_direction(direction))
            if field.optional and not can_convert(dep):
                logger.debug("Using fallback for %s in %s", field.type_name, request.key)
                fields.append(field.fallback)
                continue
            deps.append(dep)
            fields.append(converter_name(field.type_name, dep.key.direction))

        template = self._template_for(entry)
        return Artifact(
            code=self._render(template, request, deps=deps, fields=fields),
            deps=tuple(deps),
            resources=entry.imports,
        )

    @staticmethod
    def _template_for(entry: TypeEntry) -> Template:
        if entry.code is None:
            return DEFAULT_TEMPLATE
        return Template(entry.code)

    @staticmethod
    def _render(
        template: Template,
        request: Request,
        *,
        deps: list[Request] | tuple[Request, ...],
        fields: list[str] | tuple[str, ...],
    ) -> str:
        key = request.key
        return template.safe_substitute(
            name=converter_name(key.description, key.direction),
            type=key.description,
            direction=str(key.direction),
            deps=", ".join(converter_name(dep.key.description, dep.key.direction) for dep in deps),
            fields=", ".join(fields),
        )
