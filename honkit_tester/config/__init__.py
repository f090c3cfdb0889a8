"""Settings and input models for honkit-tester builds.

This subpackage holds the dataclasses that describe a book fixture (pages,
injected files, local plugin modules) together with :class:`TesterSettings`,
which controls how HonKit and plugins are installed. Settings are read from
the optional ``[tool.honkit-tester]`` table of ``pyproject.toml`` by
:func:`load_settings`.

Examples
--------
>>> from honkit_tester.config import TesterSettings
>>> TesterSettings().plugin_prefixes
('gitbook-plugin-', 'honkit-plugin-')
"""

from .loader import DEFAULT_SETTINGS_PATH, load_settings
from .models import IncludedFile, LocalModule, PageSpec, TesterSettings

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "IncludedFile",
    "LocalModule",
    "PageSpec",
    "TesterSettings",
    "load_settings",
]
