"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in bindgraph configuration."""


@dataclass(slots=True, frozen=True)
class BindgraphConfig:
    """Configuration loaded from the ``[tool.bindgraph]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    catalog: Path | None = None
    output: Path | None = None
    dot: Path | None = None
    dot_filter: str | None = None
    allow_partial: bool = False
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_path(section: dict[str, object], name: str, project_root: Path) -> Path | None:
    """Parse an optional path entry, resolving it relative to the project root.

    Raises:
        ConfigError: If the entry is not a string.

    """
    if name not in section:
        return None
    value = section[name]
    if not isinstance(value, str):
        msg = f"Invalid [tool.bindgraph].{name}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def load_config(pyproject_path: Path) -> BindgraphConfig:
    """Load and validate [tool.bindgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed BindgraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("bindgraph", {})
    if not section:
        return BindgraphConfig(project_root=project_root)

    dot_filter = section.get("dot-filter")
    if dot_filter is not None and not isinstance(dot_filter, str):
        msg = "Invalid [tool.bindgraph].dot-filter: expected string"
        raise ConfigError(msg)

    allow_partial = section.get("allow-partial", False)
    if not isinstance(allow_partial, bool):
        msg = "Invalid [tool.bindgraph].allow-partial: expected boolean"
        raise ConfigError(msg)

    return BindgraphConfig(
        catalog=_parse_path(section, "catalog", project_root),
        output=_parse_path(section, "output", project_root),
        dot=_parse_path(section, "dot", project_root),
        dot_filter=dot_filter,
        allow_partial=allow_partial,
        project_root=project_root,
    )


def get_config() -> BindgraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        BindgraphConfig (may be empty if no pyproject.toml or no [tool.bindgraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return BindgraphConfig()
    return load_config(pyproject_path)
