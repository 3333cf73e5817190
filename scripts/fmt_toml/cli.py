"""
Command line entry point: ``cargo fmt-toml``.

Cargo runs external subcommands as ``cargo-fmt-toml fmt-toml [args]``, so the
subcommand name arrives as the first argument.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from .config import load_config
from .discovery import find_manifests
from .errors import ConfigError, ManifestError
from .output import Reporter, print_error
from .pipeline import FormatMode, format_manifest

EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_ERROR = 2


@dataclass
class BatchTotals:
    files_changed: int = 0
    total_changes: int = 0
    errors: int = 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cargo", description="Cargo.toml formatting tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fmt = subparsers.add_parser("fmt-toml", help="Format Cargo.toml files in a workspace")
    fmt.add_argument("--dry-run", action="store_true",
                     help="Show what would change without writing")
    fmt.add_argument("--check", action="store_true",
                     help="Exit with code 1 if any file needs formatting")
    fmt.add_argument("--workspace-path", type=Path, default=Path("."),
                     help="Workspace root (default: current directory)")
    fmt.add_argument("--quiet", action="store_true",
                     help="Only print errors")
    fmt.add_argument("--config", type=Path, default=None,
                     help="Formatter config (default: <workspace>/fmt-toml.yaml if present)")
    return parser


def print_summary(reporter: Reporter, totals: BatchTotals, mode: FormatMode):
    if totals.total_changes == 0:
        if totals.errors == 0:
            reporter.println("✨ All files are properly formatted")
        return

    reporter.println("✨ Complete!")
    if mode.writes:
        reporter.println(f"   Formatted {totals.files_changed} files")
        reporter.println(f"   Made {totals.total_changes} changes")
        return

    reporter.println(f"   {totals.files_changed} files need formatting")
    reporter.println(f"   {totals.total_changes} total changes needed")
    if mode is FormatMode.DRY_RUN:
        reporter.println("   Run without --dry-run to apply changes")


def fmt_toml(args: argparse.Namespace) -> int:
    """Format every crate manifest in the workspace. Returns the exit code."""
    try:
        config = load_config(args.workspace_path, args.config)
    except ConfigError as e:
        print_error(str(e))
        return EXIT_ERROR

    mode = FormatMode.from_flags(dry_run=args.dry_run, check=args.check)
    manifests = find_manifests(args.workspace_path, config)
    reporter = Reporter(quiet=args.quiet)
    totals = BatchTotals()

    try:
        reporter.start_progress(len(manifests), "🔍 Formatting Cargo.toml files")
        for manifest in manifests:
            reporter.advance()
            try:
                result = format_manifest(manifest, mode, reporter, config)
            except ManifestError as e:
                reporter.error(str(e))
                totals.errors += 1
                continue
            if result.changes > 0:
                totals.files_changed += 1
                totals.total_changes += result.changes
    finally:
        reporter.finish()

    print_summary(reporter, totals, mode)

    if totals.errors > 0:
        return EXIT_ERROR
    if mode is FormatMode.CHECK and totals.total_changes > 0:
        return EXIT_CHECK_FAILED
    return EXIT_OK


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(fmt_toml(args))


if __name__ == "__main__":
    main()
