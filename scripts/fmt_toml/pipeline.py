"""
Per-manifest transform pipeline.

Runs the merge, collapse, section, package and dependency passes over one
document in a fixed order and decides what to do with the result.
"""

import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from tomlkit.toml_document import TOMLDocument

from .collapse import collapse_nested_tables, collapse_section
from .config import DEFAULT_CONFIG, FormatConfig
from .errors import ManifestError
from .ordering import format_package_section, sort_dependencies, sort_table_in_place
from .output import Reporter
from .sections import merge_split_sections, reorder_sections
from .toml_utils import DEPENDENCY_SECTIONS, detect_newline, parse_manifest, target_dependency_tables


class FormatMode(Enum):
    APPLY = "apply"
    DRY_RUN = "dry-run"
    CHECK = "check"

    @classmethod
    def from_flags(cls, dry_run: bool = False, check: bool = False) -> "FormatMode":
        if check:
            return cls.CHECK
        if dry_run:
            return cls.DRY_RUN
        return cls.APPLY

    @property
    def writes(self) -> bool:
        return self is FormatMode.APPLY


@dataclass
class ManifestResult:
    path: Path
    changes: int
    text: str
    written: bool = False


def format_document(
    doc: TOMLDocument,
    reporter: Reporter,
    config: FormatConfig = DEFAULT_CONFIG,
    source: Path | str = "<string>",
) -> tuple[TOMLDocument, int]:
    """Run every formatting pass over doc. Returns (document, count of changes)."""
    doc, changes = merge_split_sections(doc, reporter, source)

    changes += collapse_nested_tables(doc, reporter)

    doc, reordered = reorder_sections(doc, reporter, config.section_order, source)
    changes += reordered

    changes += format_package_section(doc, reporter, config.package_key_order)

    for section in DEPENDENCY_SECTIONS:
        changes += sort_dependencies(doc, section, reporter)

    for parent, kind, _ in target_dependency_tables(doc):
        changes += collapse_section(parent, kind)
        changes += sort_table_in_place(parent, kind, parent[kind], reporter)

    return doc, changes


def format_manifest_text(
    text: str,
    source: Path | str = "<string>",
    reporter: Reporter | None = None,
    config: FormatConfig = DEFAULT_CONFIG,
) -> tuple[str, int]:
    """Format manifest text. Returns (text, count of changes).

    With no changes the input text is returned as is. The passes work on
    "\\n" line endings; the result is written back with the line ending of
    the input's first line.
    """
    if reporter is None:
        reporter = Reporter(quiet=True)
    newline = detect_newline(text)
    doc = parse_manifest(text.replace("\r\n", "\n"), source)
    doc, changes = format_document(doc, reporter, config, source)
    if changes == 0:
        return text, 0
    return doc.as_string().replace("\n", newline), changes


def write_manifest(path: Path, text: str):
    """Replace path with text atomically; the original survives any failure."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", newline="", dir=str(path.parent), prefix=f".{path.name}.", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ManifestError(path, "Failed to write", str(e)) from e


def read_manifest(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(path, "Failed to read", str(e)) from e


def format_manifest(
    path: Path,
    mode: FormatMode,
    reporter: Reporter,
    config: FormatConfig = DEFAULT_CONFIG,
) -> ManifestResult:
    """Format one manifest file according to mode."""
    original = read_manifest(path)

    text, changes = format_manifest_text(original, path, reporter, config)
    result = ManifestResult(path=path, changes=changes, text=text)
    if changes == 0:
        return result

    reporter.println(f"\n📦 {path}")
    if not mode.writes:
        reporter.println(f"   Would format with {changes} changes")
        return result

    write_manifest(path, text)
    result.written = True
    reporter.println(f"   💾 Formatted with {changes} changes")
    return result
