"""Exception hierarchy raised by the honkit-tester pipeline.

Every failure surfaced to a test author derives from :class:`TesterError`, so
callers can catch the whole family while still distinguishing the stage that
failed. Configuration-time problems (:class:`ValidationError`) are raised
before any filesystem work starts; the remaining errors abort a running build.
"""

from __future__ import annotations


class TesterError(Exception):
    """Base class for every error raised by honkit-tester."""


class ContentError(TesterError, ValueError):
    """Raised when required book content (page name or body) is empty."""


class ValidationError(TesterError, ValueError):
    """Raised when a local plugin directory or its manifest is unusable."""


class SettingsError(TesterError, ValueError):
    """Raised when the ``[tool.honkit-tester]`` table has invalid values."""


class InstallationError(TesterError, RuntimeError):
    """Raised when HonKit or a referenced plugin cannot be installed."""


class OutputMissingError(TesterError, RuntimeError):
    """Raised when HonKit did not produce the ``_book`` output directory."""


class ProcessError(TesterError, RuntimeError):
    """Raised when a child process cannot be spawned or exits non-zero.

    Attributes
    ----------
    command : str
        Executable that was invoked.
    returncode : int | None
        Exit status of the child, or ``None`` when it never started.
    """

    def __init__(self, message: str, *, command: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode


__all__ = [
    "ContentError",
    "InstallationError",
    "OutputMissingError",
    "ProcessError",
    "SettingsError",
    "TesterError",
    "ValidationError",
]
