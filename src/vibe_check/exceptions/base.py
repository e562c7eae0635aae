"""Root of the vibe-check exception hierarchy."""

from typing import Mapping, Optional


class VibeCheckError(Exception):
    """Anything vibe-check reports to the user instead of crashing on.

    ``details`` are rendered after the message as ``key=value`` pairs so the
    CLI can print a single line.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, object]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({rendered})"
