"""
Top-level section ordering.

Sections are moved as raw text rather than through the document tree, so
every comment, blank line and formatting detail inside a section survives
untouched. The document is then parsed again from the reassembled text.

Lines before the first header (root-level keys and comments) form a preamble
that always stays at the top, verbatim. The same text pass also brings
together sections split across non-contiguous headers.
"""

from collections import Counter
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import AoT, Table
from tomlkit.toml_document import TOMLDocument

from .config import DEFAULT_SECTION_ORDER
from .errors import ManifestError
from .output import Reporter


def section_sequence(doc: TOMLDocument) -> list[str]:
    """Root keys that render a [header], in document order, without repeats."""
    sequence = []
    for key, item in doc.body:
        if key is None or key.is_dotted() or not isinstance(item, (Table, AoT)):
            continue
        if key.key not in sequence:
            sequence.append(key.key)
    return sequence


def expected_sequence(current: list[str], section_order=DEFAULT_SECTION_ORDER) -> list[str]:
    expected = [section for section in section_order if section in current]
    expected.extend(key for key in current if key not in section_order)
    return expected


class _ValueScanner:
    """Tracks whether the text so far ends inside a multi-line value.

    A line starting with ``[`` is only a header when no multi-line string,
    array or inline table is still open.
    """

    def __init__(self):
        self.string_delim: str | None = None
        self.depth = 0

    @property
    def open(self) -> bool:
        return self.string_delim is not None or self.depth > 0

    def feed(self, line: str):
        i = 0
        n = len(line)
        while i < n:
            if self.string_delim is not None:
                if self.string_delim == '"""' and line[i] == "\\":
                    i += 2
                    continue
                if line.startswith(self.string_delim, i):
                    i += 3
                    # Up to two extra quotes before the delimiter belong to the string.
                    extra = 0
                    while i < n and extra < 2 and line[i] == self.string_delim[0]:
                        i += 1
                        extra += 1
                    self.string_delim = None
                    continue
                i += 1
                continue

            ch = line[i]
            if ch == "#":
                break
            if line.startswith('"""', i) or line.startswith("'''", i):
                self.string_delim = line[i:i + 3]
                i += 3
                continue
            if ch == '"':
                i += 1
                while i < n and line[i] != '"':
                    if line[i] == "\\":
                        i += 1
                    i += 1
                i += 1
                continue
            if ch == "'":
                end = line.find("'", i + 1)
                i = n if end == -1 else end + 1
                continue
            if ch in "[{":
                self.depth += 1
            elif ch in "]}":
                self.depth = max(self.depth - 1, 0)
            i += 1


def _lines(text: str):
    """Split text into lines, keeping each line's own ending."""
    parts = text.split("\n")
    for part in parts[:-1]:
        yield part + "\n"
    if parts[-1]:
        yield parts[-1]


def header_key(line: str) -> str:
    """Root key of a [table] or [[array]] header line.

    ``[target.'cfg(unix)'.dependencies]`` belongs to ``target``.
    """
    return next(iter(tomlkit.parse(line.strip() + "\n")))


def split_sections(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Split serialized text into a preamble and (section key, block) pairs.

    A block runs from a header line up to the next header of a different
    section, so contiguous ``[[bin]]`` entries and ``[dependencies.foo]``
    sub-tables stay with their section. A section that reappears later in
    the file gets a second block. Comment lines directly above a header
    belong to that header's block.
    """
    preamble: list[str] = []
    blocks: list[tuple[str, list[str]]] = []
    scanner = _ValueScanner()
    target = preamble
    pending: list[str] = []

    for line in _lines(text):
        if not scanner.open:
            stripped = line.lstrip()
            if stripped.startswith("#"):
                pending.append(line)
                continue
            if stripped.startswith("["):
                key = header_key(line)
                if not blocks or blocks[-1][0] != key:
                    blocks.append((key, []))
                target = blocks[-1][1]
                target.extend(pending)
                pending = []
                target.append(line)
                continue

        target.extend(pending)
        pending = []
        scanner.feed(line)
        target.append(line)

    target.extend(pending)
    return "".join(preamble), [(key, "".join(lines)) for key, lines in blocks]


def _trim(block: str) -> str:
    """Drop trailing blank lines, keeping a final newline."""
    lines = list(_lines(block))
    while lines and not lines[-1].strip():
        lines.pop()
    trimmed = "".join(lines)
    if trimmed and not trimmed.endswith("\n"):
        trimmed += "\n"
    return trimmed


def reassemble(preamble: str, blocks: list[tuple[str, str]], expected: list[str]) -> str:
    """Join the preamble and blocks in expected order, one blank line apart."""
    order = list(expected)
    # Never drop a block whose key did not make it into the expected sequence.
    order.extend(key for key, _ in blocks if key not in order)

    parts = []
    if _trim(preamble):
        parts.append(_trim(preamble))
    for key in order:
        parts.extend(_trim(block) for block_key, block in blocks if block_key == key)
    return "\n".join(parts)


def split_section_keys(doc: TOMLDocument) -> list[str]:
    """Sections written under non-contiguous headers.

    tomlkit folds contiguous headers of one section into a single root item,
    so a key that owns several root items was split by another section.
    """
    counts = Counter(
        key.key for key, item in doc.body
        if key is not None and not key.is_dotted() and isinstance(item, (Table, AoT))
    )
    return [key for key, count in counts.items() if count > 1]


def _reassembled(doc: TOMLDocument, expected: list[str], source: Path | str) -> TOMLDocument:
    try:
        preamble, blocks = split_sections(doc.as_string())
        new_doc = tomlkit.parse(reassemble(preamble, blocks, expected))
    except TOMLKitError as e:
        raise ManifestError(source, "Failed to parse reordered", str(e)) from e

    if set(new_doc.keys()) != set(doc.keys()):
        raise ManifestError(source, "Section reorder changed the top-level keys of")
    return new_doc


def merge_split_sections(
    doc: TOMLDocument,
    reporter: Reporter,
    source: Path | str = "<string>",
) -> tuple[TOMLDocument, int]:
    """Bring every header of a split section together. Returns (document, count of changes).

    Sections keep their current order; later headers of a split section move
    up to join its first block. Afterwards every section is a plain table the other passes can
    rebuild.
    """
    if not split_section_keys(doc):
        return doc, 0

    new_doc = _reassembled(doc, section_sequence(doc), source)
    reporter.println("   ✓ Merged split sections")
    return new_doc, 1


def reorder_sections(
    doc: TOMLDocument,
    reporter: Reporter,
    section_order=DEFAULT_SECTION_ORDER,
    source: Path | str = "<string>",
) -> tuple[TOMLDocument, int]:
    """Put top-level sections in canonical order. Returns (document, count of changes)."""
    current = section_sequence(doc)
    expected = expected_sequence(current, section_order)
    if current == expected:
        return doc, 0

    new_doc = _reassembled(doc, expected, source)
    reporter.println("   ✓ Reordered sections")
    return new_doc, 1
