"""Names of generated converter functions."""

import hashlib
import re

from bindgraph._key import Direction

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NON_WORD_RE = re.compile(r"\W+")
# Shapes of the names derived for pointers, slices and hashed descriptions
_DERIVED_NAME_RE = re.compile(r"^(?:ptr|slice)_|_[0-9a-f]{16}$")
_MAX_PREFIX_LENGTH = 24


def type_hash(description: str) -> str:
    """Return a short, stable hash of a type description."""
    return hashlib.blake2b(description.encode(), digest_size=8).hexdigest()


def unique_name(description: str) -> str:
    """Return an identifier that uniquely stands for a type description.

    Example:
        >>> unique_name("*Point")
        'ptr_Point'
        >>> unique_name("[]byte")
        'slice_byte'
        >>> unique_name("ptr_Point") == unique_name("*Point")
        False

    """
    if _IDENTIFIER_RE.match(description) and not _DERIVED_NAME_RE.search(description):
        return description
    if description.startswith("*"):
        return f"ptr_{unique_name(description[1:])}"
    if description.startswith("[]"):
        return f"slice_{unique_name(description[2:])}"
    prefix = _NON_WORD_RE.sub("_", description).strip("_")[:_MAX_PREFIX_LENGTH] or "type"
    return f"{prefix}_{type_hash(description)}"


def converter_name(description: str, direction: Direction) -> str:
    """Return the name of the converter function for a type and direction.

    Example:
        >>> converter_name("*Point", Direction.FROM_DYNAMIC)
        'conv_ptr_Point_fromDynamic'

    """
    return f"conv_{unique_name(description)}_{direction.camel_case}"
