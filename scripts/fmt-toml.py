#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = ["tomlkit", "rich", "ruamel.yaml"]
# ///
"""
Format every crate Cargo.toml in a workspace.

Usage: uv run scripts/fmt-toml.py [--dry-run] [--check] [--workspace-path PATH] [--quiet] [--config PATH]

Sections, [package] keys and dependencies are put in canonical order and
nested dependency tables are collapsed into inline tables. Comments and
formatting outside those rules are left alone.
"""

import sys
from pathlib import Path

# Add this directory to path for fmt_toml imports
sys.path.insert(0, str(Path(__file__).parent))

from fmt_toml.cli import main


if __name__ == "__main__":
    main(["fmt-toml", *sys.argv[1:]])
