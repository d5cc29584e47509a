"""Pydantic models of the type catalog file."""

from enum import StrEnum, auto
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bindgraph._key import Direction

DEFAULT_PRIMITIVES: tuple[str, ...] = (
    "bool",
    "byte",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
)


def _parse_direction(value: object) -> object:
    if isinstance(value, str):
        return Direction.parse(value)
    return value


class UnsupportedKind(StrEnum):
    """Reasons a host type can never be converted."""

    INTERNAL = auto()
    UNEXPORTED = auto()
    GENERIC = auto()
    CGO = auto()
    INVALID = auto()
    INCOMPLETE = auto()

    @property
    def reason(self) -> str:
        """The failure reason reported for the type."""
        match self:
            case UnsupportedKind.INTERNAL:
                return "use of internal package"
            case UnsupportedKind.UNEXPORTED:
                return "use of unexported name"
            case UnsupportedKind.GENERIC:
                return "use of generic declaration"
            case UnsupportedKind.CGO:
                return "use of CGo"
            case UnsupportedKind.INVALID:
                return "use of invalid type"
            case UnsupportedKind.INCOMPLETE:
                return "use of incomplete (or unallocatable) type"


class FieldSpec(BaseModel):
    """A component of a type that needs its own converter.

    Attributes:
        type_name: Description of the component's type.
        direction: ``same`` to convert the component the same way as the
            containing type, ``opposite`` for e.g. function parameters.
        optional: Drop the component instead of failing if it cannot be
            converted.
        fallback: Text used in place of a dropped optional component.

    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type_name: str = Field(alias="type")
    direction: Literal["same", "opposite"] = "same"
    optional: bool = False
    fallback: str = "nil"

    def target_direction(self, direction: Direction) -> Direction:
        """Return the direction the component is converted in."""
        if self.direction == "opposite":
            return direction.opposite()
        return direction


class TypeEntry(BaseModel):
    """How to convert one host type."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    members: tuple[FieldSpec, ...] = Field(default=(), alias="fields")
    imports: tuple[str, ...] = ()
    unsupported: UnsupportedKind | None = None
    error: str | None = None
    code: str | None = None
    directions: frozenset[Direction] = frozenset(Direction)

    @field_validator("members", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:  # noqa: ANN401
        # A bare string is shorthand for a required field of that type
        if isinstance(value, list | tuple):
            return [{"type": item} if isinstance(item, str) else item for item in value]
        return value

    @field_validator("directions", mode="before")
    @classmethod
    def _parse_directions(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, list | tuple | set | frozenset):
            return [_parse_direction(item) for item in value]
        return value

    @model_validator(mode="after")
    def _check_failure_fields(self) -> Self:
        if self.unsupported is not None and self.error is not None:
            msg = "'unsupported' and 'error' are mutually exclusive"
            raise ValueError(msg)
        if not self.directions:
            msg = "'directions' must name at least one direction"
            raise ValueError(msg)
        return self


class SeedSpec(BaseModel):
    """A converter the generated code must provide."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type_name: str = Field(alias="type")
    direction: Direction = Direction.TO_DYNAMIC
    label: str | None = None

    @field_validator("direction", mode="before")
    @classmethod
    def _parse(cls, value: Any) -> Any:  # noqa: ANN401
        return _parse_direction(value)


class CatalogSettings(BaseModel):
    """Catalog-wide settings."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    base_package: str | None = Field(default=None, alias="base-package")
    primitives: tuple[str, ...] = DEFAULT_PRIMITIVES
    prelude: str = ""


class TypeCatalog(BaseModel):
    """Every host type the generator knows how to convert.

    Example:
        >>> TypeCatalog.model_validate({
        ...     "seeds": [{"type": "Point"}],
        ...     "types": {"Point": {"fields": ["int", "int"]}},
        ... })

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    settings: CatalogSettings = CatalogSettings()
    seeds: tuple[SeedSpec, ...] = ()
    types: dict[str, TypeEntry] = Field(default_factory=dict)
