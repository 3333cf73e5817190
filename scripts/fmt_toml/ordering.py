"""
In-tree key ordering: alphabetical dependency tables and the canonical
[package] key order.
"""

from tomlkit.items import Table
from tomlkit.toml_document import TOMLDocument

from .config import DEFAULT_PACKAGE_KEY_ORDER
from .output import Reporter
from .toml_utils import reorder_table


def sort_table_in_place(parent, name: str, table: Table, reporter: Reporter) -> int:
    """Sort the entries of parent[name] by key. Returns 1 if reordered, else 0.

    Reordering a table counts as a single change regardless of how many keys
    moved.
    """
    if not isinstance(table, Table):
        return 0

    if not reorder_table(parent, name, table, sorted(table.keys())):
        return 0

    reporter.println("   ✓ Sorted dependencies alphabetically")
    return 1


def sort_dependencies(doc: TOMLDocument, section: str, reporter: Reporter) -> int:
    table = doc.get(section)
    if table is None:
        return 0
    return sort_table_in_place(doc, section, table, reporter)


def expected_package_order(keys: list[str], key_order=DEFAULT_PACKAGE_KEY_ORDER) -> list[str]:
    """Canonical keys that are present, then every other key in original order."""
    expected = [key for key in key_order if key in keys]
    expected.extend(key for key in keys if key not in key_order)
    return expected


def format_package_section(doc: TOMLDocument, reporter: Reporter, key_order=DEFAULT_PACKAGE_KEY_ORDER) -> int:
    """Put [package] keys in canonical order. Returns count of changes."""
    package = doc.get("package")
    if not isinstance(package, Table):
        return 0

    expected = expected_package_order(list(package.keys()), key_order)
    if not reorder_table(doc, "package", package, expected):
        return 0

    reporter.println("   ✓ Reordered [package] section")
    return 1
