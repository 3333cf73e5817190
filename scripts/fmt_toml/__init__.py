"""
Shared modules for the Cargo.toml formatter.
"""

from .errors import ConfigError, ManifestError

from .output import (
    RED,
    GREEN,
    YELLOW,
    DIM,
    NC,
    Reporter,
    print_ok,
    print_error,
    print_warning,
    print_dim,
)

from .config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    DEFAULT_PACKAGE_KEY_ORDER,
    DEFAULT_SECTION_ORDER,
    FormatConfig,
    load_config,
)

from .collapse import collapse_nested_tables, collapse_table_entries
from .ordering import format_package_section, sort_dependencies, sort_table_in_place
from .sections import merge_split_sections, reorder_sections, split_sections

from .pipeline import (
    FormatMode,
    ManifestResult,
    format_document,
    format_manifest,
    format_manifest_text,
)

from .discovery import find_manifests

__all__ = [
    # errors
    "ConfigError",
    "ManifestError",
    # output
    "RED",
    "GREEN",
    "YELLOW",
    "DIM",
    "NC",
    "Reporter",
    "print_ok",
    "print_error",
    "print_warning",
    "print_dim",
    # config
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "DEFAULT_PACKAGE_KEY_ORDER",
    "DEFAULT_SECTION_ORDER",
    "FormatConfig",
    "load_config",
    # passes
    "collapse_nested_tables",
    "collapse_table_entries",
    "format_package_section",
    "sort_dependencies",
    "sort_table_in_place",
    "merge_split_sections",
    "reorder_sections",
    "split_sections",
    # pipeline
    "FormatMode",
    "ManifestResult",
    "format_document",
    "format_manifest",
    "format_manifest_text",
    # discovery
    "find_manifests",
]
