"""
Formatter configuration.

Defaults match the workspace standards. A workspace can override them with an
``fmt-toml.yaml`` file next to its root Cargo.toml:

    section_order: [package, lib, bin, dependencies, features]
    package_key_order: [name, version, edition]
    crates_dir: crates
    manifest_name: Cargo.toml
"""

from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

CONFIG_FILENAME = "fmt-toml.yaml"

DEFAULT_SECTION_ORDER = (
    "package",
    "lib",
    "bin",
    "test",
    "bench",
    "example",
    "dependencies",
    "dev-dependencies",
    "build-dependencies",
    "target",
    "features",
)

DEFAULT_PACKAGE_KEY_ORDER = (
    "name",
    "description",
    "version",
    "edition",
    "license-file",
    "authors",
    "rust-version",
    "readme",
)


@dataclass(frozen=True)
class FormatConfig:
    section_order: tuple[str, ...] = DEFAULT_SECTION_ORDER
    package_key_order: tuple[str, ...] = DEFAULT_PACKAGE_KEY_ORDER
    crates_dir: str = "crates"
    manifest_name: str = "Cargo.toml"


DEFAULT_CONFIG = FormatConfig()

_LIST_FIELDS = ("section_order", "package_key_order")
_STR_FIELDS = ("crates_dir", "manifest_name")


def create_yaml() -> YAML:
    """Create a YAML instance for reading plain config data."""
    return YAML(typ="safe")


def load_config(workspace: Path, config_path: Path | None = None) -> FormatConfig:
    """Load formatter settings for a workspace.

    An explicit config_path must exist. Without one, fmt-toml.yaml in the
    workspace root is used when present, otherwise the defaults.
    """
    path = config_path if config_path is not None else workspace / CONFIG_FILENAME
    if config_path is None and not path.exists():
        return DEFAULT_CONFIG

    yaml = create_yaml()
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    return config_from_mapping(data, source=str(path))


def config_from_mapping(data: dict, source: str = "config") -> FormatConfig:
    """Validate a raw mapping and merge it over the defaults."""
    unknown = sorted(set(data) - set(_LIST_FIELDS) - set(_STR_FIELDS))
    if unknown:
        raise ConfigError(f"Unknown keys in {source}: {', '.join(map(str, unknown))}")

    values = {}
    for name in _LIST_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{source}: {name} must be a list of strings")
        if len(set(value)) != len(value):
            raise ConfigError(f"{source}: {name} contains duplicates")
        values[name] = tuple(value)

    for name in _STR_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{source}: {name} must be a non-empty string")
        values[name] = value

    return FormatConfig(**values)
