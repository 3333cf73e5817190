"""
Collapse nested sub-tables into single-line inline tables.

    [dependencies.serde]
    version = "1.0"
    features = ["derive"]

becomes

    [dependencies]
    serde = { version = "1.0", features = ["derive"] }
"""

import tomlkit
from tomlkit.container import OutOfOrderTableProxy
from tomlkit.items import AoT, InlineTable, Item, SingleKey, Table, Whitespace
from tomlkit.toml_document import TOMLDocument

from .output import Reporter
from .toml_utils import DEPENDENCY_SECTIONS, Entry, arrange, rebuild_table, table_entries, target_dependency_tables


def inline_from_table(table: Table) -> InlineTable | None:
    """Build the inline equivalent of table, or None if a child is not a plain value.

    Keys keep their quoting and values their original text, joined by a
    single " = ". Comments inside the table have nowhere to go in an inline
    table and are dropped; a comment on the header line moves to the end of
    the inline entry, which also takes the header's indentation.
    """
    pairs = []
    for key, item in table.value.body:
        if key is None:
            continue
        if isinstance(item, (Table, AoT)):
            return None
        pairs.append(f"{key.as_string().strip()} = {item.as_string()}")

    inline = tomlkit.value("{ " + ", ".join(pairs) + " }") if pairs else tomlkit.inline_table()
    inline.trivia.indent = table.trivia.indent
    if table.trivia.comment:
        inline.trivia.comment_ws = table.trivia.comment_ws or " "
        inline.trivia.comment = table.trivia.comment
    return inline


def is_collapsible(entry: Entry) -> bool:
    """Header sub-tables only; dotted keys and implicit parents never collapse."""
    return (
        isinstance(entry.item, Table)
        and not entry.key.is_dotted()
        and not entry.item.is_super_table()
        and not entry.item.is_aot_element()
    )


def _tail_whitespace(table: Table) -> list[Item]:
    """Blank lines after the last key of table."""
    _, trailing = table_entries(table)
    return [item for item in trailing if isinstance(item, Whitespace)]


def collapse_table(parent, name: str, table: Table) -> int:
    """Collapse the sub-tables of parent[name] and rebuild it. Returns count collapsed.

    Blank lines that separated a collapsed header from its neighbours are
    dropped, except after the last one, where they keep the gap before the
    next section.
    """
    entries, trailing = table_entries(table)
    names = [entry.name for entry in entries]
    if len(set(names)) != len(names):
        return collapse_table_entries(table)

    collapsed = 0
    rebuilt = []
    for entry in entries:
        inline = inline_from_table(entry.item) if is_collapsible(entry) else None
        if inline is None:
            rebuilt.append(entry)
            continue
        # Header keys carry no " = " separator.
        key = SingleKey(entry.key.key, t=entry.key.t, original=entry.key.as_string())
        leading = [item for item in entry.leading if not isinstance(item, Whitespace)]
        rebuilt.append(Entry(key, inline, leading))
        collapsed += 1

    if collapsed == 0:
        return 0

    ordered = arrange(rebuilt, names)
    last = entries[-1]
    if not ordered[-1].renders_header and is_collapsible(last) and not trailing:
        trailing = _tail_whitespace(last.item)

    rebuild_table(parent, name, table, ordered, trailing)
    return collapsed


def collapse_table_entries(table) -> int:
    """Collapse sub-tables through the mapping interface. Returns count collapsed.

    Used for tables whose body repeats a key (dotted lines of one key split
    by other entries), which cannot be rebuilt from whole entries.
    """
    replacements = []
    for key in list(table.keys()):
        child = table[key]
        if not isinstance(child, Table) or child.is_super_table() or child.is_aot_element():
            continue
        inline = inline_from_table(child)
        if inline is not None:
            replacements.append((key, inline))

    for key, inline in replacements:
        table[key] = inline

    return len(replacements)


def collapse_section(parent, name: str) -> int:
    """Collapse the sub-tables of parent[name], if it is a table."""
    table = parent.get(name)
    if isinstance(table, Table):
        return collapse_table(parent, name, table)
    if isinstance(table, OutOfOrderTableProxy):
        return collapse_table_entries(table)
    return 0


def collapse_nested_tables(doc: TOMLDocument, reporter: Reporter) -> int:
    """Collapse nested tables in [package] and every dependency table. Returns count of changes."""
    changes = collapse_section(doc, "package")

    for section in DEPENDENCY_SECTIONS:
        changes += collapse_section(doc, section)

    for parent, kind, _ in target_dependency_tables(doc):
        changes += collapse_section(parent, kind)

    if changes > 0:
        reporter.println("   ✓ Collapsed nested tables into inline entries")

    return changes
