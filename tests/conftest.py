from __future__ import annotations

import sys
import textwrap
from pathlib import Path

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPTS) not in sys.path:
    sys.path.insert(0, str(SCRIPTS))


import pytest

from fmt_toml.output import Reporter


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


@pytest.fixture
def reporter() -> Reporter:
    return Reporter(quiet=True)


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a crate manifest at <tmp_path>/crates/<crate>/Cargo.toml."""

    def _write(crate: str, text: str) -> Path:
        path = tmp_path / "crates" / crate / "Cargo.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_dedent(text), encoding="utf-8")
        return path

    return _write
