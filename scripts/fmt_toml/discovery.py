"""
Manifest discovery within a workspace.
"""

from pathlib import Path

from .config import DEFAULT_CONFIG, FormatConfig


def find_manifests(workspace: Path, config: FormatConfig = DEFAULT_CONFIG) -> list[Path]:
    """Find <workspace>/<crates_dir>/*/<manifest_name>, sorted.

    Only direct children of the crates directory are checked; nested crates
    and the workspace root manifest are not formatted.
    """
    crates_dir = workspace / config.crates_dir
    if not crates_dir.is_dir():
        return []

    manifests = []
    for crate_dir in crates_dir.iterdir():
        manifest = crate_dir / config.manifest_name
        if crate_dir.is_dir() and manifest.is_file():
            manifests.append(manifest)
    return sorted(manifests)
