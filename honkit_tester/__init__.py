"""Build throwaway HonKit books to test HonKit and GitBook plugins.

This package scaffolds a minimal book in a temporary directory, links local
plugins into it, installs HonKit and registry plugins, runs ``honkit build``
and hands the rendered files back as an indexable result.

Exports
-------
- ``builder``: Start a fluent :class:`BookBuilder`.
- ``BookResult`` / ``OutputEntry``: Rendered files of one build.
- Error classes from :mod:`honkit_tester.errors`.

Examples
--------
>>> from honkit_tester import builder
>>> result = builder().with_content("# Hello").create()  # doctest: +SKIP
>>> result.get("index.html").content  # doctest: +SKIP
'<h1 id="hello">Hello</h1>'
"""

from __future__ import annotations

from .builder import BookBuilder, builder
from .config import TesterSettings, load_settings
from .errors import (
    ContentError,
    InstallationError,
    OutputMissingError,
    ProcessError,
    SettingsError,
    TesterError,
    ValidationError,
)
from .output import BookResult, OutputEntry

__all__ = [
    "BookBuilder",
    "BookResult",
    "ContentError",
    "InstallationError",
    "OutputEntry",
    "OutputMissingError",
    "ProcessError",
    "SettingsError",
    "TesterError",
    "TesterSettings",
    "ValidationError",
    "builder",
    "load_settings",
]
