"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in toporder configuration."""


@dataclass(slots=True, frozen=True)
class ToporderConfig:
    """Defaults for the sort commands, read from `[tool.toporder]`.

    `strict` is None when unset, leaving the choice to the kind of input file.
    """

    flip_edges: bool = False
    strict: bool | None = None
    exclude: tuple[str, ...] = ()
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find the nearest pyproject.toml in start_dir or one of its ancestors.

    Args:
        start_dir: Directory to search from. Defaults to the working directory.

    Returns:
        Path to the closest pyproject.toml, or None when no ancestor has one.

    """
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _parse_bool(section: dict[str, object], key: str, default: bool | None = False) -> bool | None:
    if key not in section:
        return default
    value = section[key]
    if not isinstance(value, bool):
        msg = f"Invalid [tool.toporder].{key}: expected boolean"
        raise ConfigError(msg)
    return value


def _parse_exclude(section: dict[str, object]) -> tuple[str, ...]:
    value = section.get("exclude", [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = "Invalid [tool.toporder].exclude: expected list of strings"
        raise ConfigError(msg)
    return tuple(value)


def load_config(pyproject_path: Path) -> ToporderConfig:
    """Load and validate [tool.toporder] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ToporderConfig

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

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        msg = "Invalid [tool] configuration: expected a table"
        raise ConfigError(msg)

    section = tool.get("toporder", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.toporder] configuration: expected a table"
        raise ConfigError(msg)

    unknown = set(section) - {"flip_edges", "strict", "exclude"}
    if unknown:
        msg = f"Unknown [tool.toporder] keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    return ToporderConfig(
        flip_edges=_parse_bool(section, "flip_edges") is True,
        strict=_parse_bool(section, "strict", default=None),
        exclude=_parse_exclude(section),
        project_root=project_root,
    )


def get_config() -> ToporderConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ToporderConfig (defaults if no pyproject.toml or no [tool.toporder] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ToporderConfig()
    return load_config(pyproject_path)
