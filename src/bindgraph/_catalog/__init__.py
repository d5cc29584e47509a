"""Declarative artifact calculator driven by a TOML type catalog."""

from ._calculator import CatalogCalculator
from ._io import CatalogError, load_catalog
from ._models import (
    DEFAULT_PRIMITIVES,
    CatalogSettings,
    FieldSpec,
    SeedSpec,
    TypeCatalog,
    TypeEntry,
    UnsupportedKind,
)
from ._naming import converter_name, type_hash, unique_name

__all__ = [
    "DEFAULT_PRIMITIVES",
    "CatalogCalculator",
    "CatalogError",
    "CatalogSettings",
    "FieldSpec",
    "SeedSpec",
    "TypeCatalog",
    "TypeEntry",
    "UnsupportedKind",
    "converter_name",
    "load_catalog",
    "type_hash",
    "unique_name",
]
