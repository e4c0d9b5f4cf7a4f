"""Error taxonomy surfaced by fsmconvert."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class FSMError(Exception):
    """Base class for all fsmconvert errors."""

    pass


class UnsupportedOutputFormat(FSMError):
    """No language binding is registered for the requested format."""

    def __init__(self, format: Any) -> None:
        self.format = getattr(format, "value", format)
        super().__init__(f"Unsupported output format: {self.format}")


class MissingManifest(FSMError):
    """An arrangement was loaded from a directory without a manifest."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Arrangement manifest not found: {self.path}")


class ConfigError(FSMError):
    """Error in configuration."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Config error in '{field}': {message}")
