"""
Exceptions raised while formatting manifests.
"""

from pathlib import Path


class ManifestError(Exception):
    """A read, parse or write failure attributable to one manifest."""

    def __init__(self, path: Path | str, message: str, detail: str | None = None):
        text = f"{message} {path}"
        if detail:
            text += f": {detail}"
        super().__init__(text)
        self.path = path
        self.message = message
        self.detail = detail


class ConfigError(ValueError):
    """Invalid fmt-toml.yaml contents."""
