"""Configuration exceptions: repository paths and settings."""

from pathlib import Path
from typing import Any

from .base import VibeCheckError


class ConfigurationError(VibeCheckError):
    """Bad input before any analysis starts."""


class InvalidPathError(ConfigurationError):
    """The repository path is missing or not a directory."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot analyze {path}", details={"reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """A setting or option value is out of range."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"Invalid value for {key}: {value!r}", details={"reason": reason})
        self.key = key
        self.value = value
        self.reason = reason
