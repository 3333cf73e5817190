"""
Shared tomlkit helpers for manifest formatting.

tomlkit keeps comments and blank lines as keyless items in a table body, so
entries are reordered as whole units: the key, its item, and the comment and
blank-line items directly above it.
"""

from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from tomlkit.container import Container, OutOfOrderTableProxy
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import AoT, Item, Key, Null, Table
from tomlkit.toml_document import TOMLDocument

from .errors import ManifestError

DEPENDENCY_SECTIONS = ("dependencies", "dev-dependencies", "build-dependencies")

# A section split across non-contiguous headers is exposed as a proxy.
TABLE_TYPES = (Table, OutOfOrderTableProxy)


@dataclass
class Entry:
    key: Key
    item: Item
    leading: list[Item] = field(default_factory=list)
    # Further dotted lines of the same key, with the trivia between them.
    rest: list[tuple[Key | None, Item]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.key.key

    @property
    def renders_header(self) -> bool:
        return renders_header(self.key, self.item)


def detect_newline(text: str) -> str:
    """Line ending of the first line of text, "\\n" when it has none."""
    end = text.find("\n")
    return "\r\n" if end > 0 and text[end - 1] == "\r" else "\n"


def parse_manifest(text: str, source: Path | str = "<string>") -> TOMLDocument:
    """Parse manifest text, naming the source in any error."""
    try:
        return tomlkit.parse(text)
    except TOMLKitError as e:
        raise ManifestError(source, "Failed to parse", str(e)) from e


def renders_header(key: Key, item: Item) -> bool:
    """True if the entry is written under its own [header] instead of inline."""
    return isinstance(item, (Table, AoT)) and not key.is_dotted()


def is_dotted_table(table: Table) -> bool:
    """True for a table written with dotted keys (`serde.version = "1"`)."""
    return table.is_super_table() and any(
        key is not None and not renders_header(key, item) for key, item in table.value.body
    )


def table_entries(table: Table) -> tuple[list[Entry], list[Item]]:
    """Split a table body into entries plus the trivia after the last key.

    tomlkit keeps each dotted line as its own body item, so consecutive lines
    of one dotted key (``serde.workspace``, ``serde.features``) are grouped
    into a single entry.
    """
    entries = []
    pending = []
    for key, item in table.value.body:
        if isinstance(item, Null):
            continue
        if key is None:
            pending.append(item)
            continue
        if entries and key.is_dotted() and entries[-1].key.is_dotted() and entries[-1].name == key.key:
            entries[-1].rest.extend((None, trivia) for trivia in pending)
            entries[-1].rest.append((key, item))
        else:
            entries.append(Entry(key, item, pending))
        pending = []
    return entries, pending


def arrange(entries: list[Entry], names: list[str]) -> list[Entry]:
    """Order entries by names, keeping inline entries ahead of header entries."""
    by_name = {entry.name: entry for entry in entries}
    ordered = [by_name[name] for name in names]
    return (
        [entry for entry in ordered if not entry.renders_header]
        + [entry for entry in ordered if entry.renders_header]
    )


def rebuild_table(parent, name: str, table: Table, entries: list[Entry], trailing: list[Item]) -> Table:
    """Replace parent[name] with a copy of table whose body follows entries.

    An implicit parent table that now holds plain values is rebuilt as an
    explicit one, so it renders its own [name] header.
    """
    container = Container(True)
    for position, entry in enumerate(entries):
        is_last = position == len(entries) - 1
        if not is_last and not isinstance(entry.item, (Table, AoT)) and not entry.item.trivia.trail.endswith("\n"):
            entry.item.trivia.trail += "\n"
        for trivia in entry.leading:
            container.append(None, trivia)
        container.append(entry.key, entry.item)
        for key, item in entry.rest:
            container.append(key, item)
    for trivia in trailing:
        container.append(None, trivia)
    container.parsing(False)

    becomes_explicit = table.is_super_table() and any(not entry.renders_header for entry in entries)

    rebuilt = Table(
        container,
        table.trivia,
        table.is_aot_element(),
        is_super_table=None if table.is_super_table() else False,
        name=table.name,
        display_name=table.display_name,
    )
    parent[name] = rebuilt
    if becomes_explicit:
        # An implicit parent carries the comment of the header that created it.
        rebuilt.trivia.comment_ws = ""
        rebuilt.trivia.comment = ""
    return rebuilt


def reorder_table(parent, name: str, table: Table, names: list[str]) -> bool:
    """Rebuild table so its entries follow names. Returns True if anything moved.

    Tables whose body still repeats a key after grouping (dotted lines of one
    key split by other entries) are left as written, as are dotted-key tables.
    """
    if is_dotted_table(table):
        return False
    entries, trailing = table_entries(table)
    current = [entry.name for entry in entries]
    if len(set(current)) != len(current) or sorted(current) != sorted(names):
        return False

    expected = arrange(entries, names)
    if current == [entry.name for entry in expected]:
        return False

    rebuild_table(parent, name, table, expected, trailing)
    return True


def target_dependency_tables(doc: TOMLDocument) -> list[tuple[object, str, object]]:
    """Collect (parent, kind, table) for every [target.<platform>.<kind>] table."""
    found = []
    target = doc.get("target")
    if not isinstance(target, TABLE_TYPES):
        return found
    for platform in list(target.keys()):
        config = target[platform]
        if not isinstance(config, TABLE_TYPES):
            continue
        for kind in DEPENDENCY_SECTIONS:
            deps = config.get(kind)
            if isinstance(deps, TABLE_TYPES):
                found.append((config, kind, deps))
    return found
