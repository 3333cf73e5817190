#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = ["tomlkit", "rich", "ruamel.yaml"]
# ///
"""
Format a single Cargo.toml.

Usage: uv run format-manifest.py [input] [output] [--check]

Input defaults to Cargo.toml in the current directory and output defaults to
the input. With --check nothing is written and the exit code is 1 when the
file needs formatting. Settings come from fmt-toml.yaml in the current
directory, if present.
"""

import sys
from pathlib import Path

# Add parent directory to path for fmt_toml imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fmt_toml import ConfigError, ManifestError, Reporter, load_config, print_dim, print_error, print_ok, print_warning
from fmt_toml.pipeline import format_manifest_text, read_manifest, write_manifest


def main() -> int:
    check = "--check" in sys.argv
    args = [a for a in sys.argv[1:] if not a.startswith('--')]
    input_file = Path(args[0]) if args else Path("Cargo.toml")
    output_file = Path(args[1]) if len(args) > 1 else input_file

    try:
        config = load_config(Path.cwd())
        original = read_manifest(input_file)
        text, changes = format_manifest_text(original, input_file, Reporter(quiet=check), config)
        if check:
            if changes > 0:
                print_warning(f"{input_file} needs formatting ({changes} changes)")
                return 1
            print_dim(f"{input_file} is properly formatted")
            return 0
        if changes > 0 or output_file != input_file:
            write_manifest(output_file, text)
    except (ConfigError, ManifestError) as e:
        print_error(str(e))
        return 2

    if changes == 0:
        print_dim(f"{input_file} is properly formatted")
    else:
        print_ok(f"Formatted {input_file} ({changes} changes)")
    return 0


if __name__ == '__main__':
    sys.exit(main())
