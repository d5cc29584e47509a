"""Loading type catalogs from TOML files."""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from ._models import TypeCatalog

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Error reading or validating a type catalog."""


def load_catalog(path: Path | str) -> TypeCatalog:
    """Load and validate a type catalog.

    Args:
        path: Path to the TOML catalog file.

    Returns:
        The validated TypeCatalog.

    Raises:
        CatalogError: If the file cannot be read, is not valid TOML or does
            not describe a valid catalog.

    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        msg = f"Cannot read catalog {path}: {e}"
        raise CatalogError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise CatalogError(msg) from e

    try:
        catalog = TypeCatalog.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid catalog {path}:\n{e}"
        raise CatalogError(msg) from e

    logger.debug(f"Loaded catalog from {path} with {len(catalog.types)} types")
    return catalog
