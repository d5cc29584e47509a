"""Identities of conversion artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from functools import total_ordering
from typing import Self


class Direction(IntEnum):
    """Direction of a conversion between a host type and a dynamic value.

    The integer values define the sort order of keys: every ``TO_DYNAMIC``
    key sorts before every ``FROM_DYNAMIC`` key.
    """

    TO_DYNAMIC = 0
    FROM_DYNAMIC = 1

    def __str__(self) -> str:
        """Return the PascalCase name (``ToDynamic`` or ``FromDynamic``)."""
        match self:
            case Direction.TO_DYNAMIC:
                return "ToDynamic"
            case Direction.FROM_DYNAMIC:
                return "FromDynamic"

    @property
    def camel_case(self) -> str:
        """The camelCase name (``toDynamic`` or ``fromDynamic``)."""
        text = str(self)
        return text[0].lower() + text[1:]

    @property
    def human(self) -> str:
        """The name used in user-facing messages."""
        match self:
            case Direction.TO_DYNAMIC:
                return "to dynamic"
            case Direction.FROM_DYNAMIC:
                return "from dynamic"

    def opposite(self) -> Direction:
        """Return the other direction."""
        match self:
            case Direction.TO_DYNAMIC:
                return Direction.FROM_DYNAMIC
            case Direction.FROM_DYNAMIC:
                return Direction.TO_DYNAMIC

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a direction from user input.

        Accepts ``to``/``from`` as well as the enum names in snake, kebab,
        Pascal and camel case, ignoring case.

        Args:
            text: The text to parse.

        Returns:
            The parsed direction.

        Raises:
            ValueError: If the text does not name a direction.

        """
        normalized = text.strip().lower().replace("-", "").replace("_", "")
        if normalized in {"to", "todynamic"}:
            return cls.TO_DYNAMIC
        if normalized in {"from", "fromdynamic"}:
            return cls.FROM_DYNAMIC
        msg = f"Invalid direction '{text}'. Expected 'to' or 'from'"
        raise ValueError(msg)


@total_ordering
@dataclass(frozen=True, slots=True)
class Key:
    """Identity of one conversion artifact.

    Keys are used for memoization, as graph edge endpoints and for the
    deterministic iteration order of results, which sorts by direction and
    then by description.

    Attributes:
        description: Canonical description of the host type (e.g. ``*Point``).
        direction: Which way the artifact converts.

    """

    description: str
    direction: Direction = Direction.TO_DYNAMIC

    def _sort_key(self) -> tuple[int, str]:
        return (int(self.direction), self.description)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return f"{self.description} ({self.direction})"


@dataclass(frozen=True, slots=True)
class Request:
    """A request to make sure the artifact for ``key`` exists.

    Debug labels describe who asked for the artifact. They are only used
    for diagnostics and never affect identity or results.
    """

    key: Key
    debug_labels: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def of(
        cls,
        description: str,
        direction: Direction = Direction.TO_DYNAMIC,
        *debug_labels: str,
    ) -> Self:
        """Create a request from a description and direction."""
        return cls(Key(description, direction), tuple(debug_labels))
