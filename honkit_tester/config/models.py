"""Typed dataclasses describing honkit-tester settings and book inputs."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from honkit_tester._constants import PLUGIN_PACKAGE_PREFIXES


@dc.dataclass(slots=True)
class TesterSettings:
    """Tunable knobs for installing HonKit and its plugins.

    Attributes
    ----------
    plugin_prefixes : tuple[str, ...]
        Package-name prefixes recognized as HonKit/GitBook plugin namespaces.
    generator_package : str
        npm package installed when the local copy of HonKit is unavailable.
    honkit_module : Path | None
        Explicit HonKit package directory used for the copy install path.
    npm_command : str
        Executable used for network installs.
    node_command : str
        Executable used to resolve the installed HonKit package.
    install_retries : int
        Number of polls before declaring the HonKit entry point missing.
    install_interval : float
        Seconds to sleep between polls.
    log_file : Path | None
        Persistent debug log; ``None`` disables the file sink.
    silent : bool
        Mute console logging; the file sink keeps recording.
    """

    plugin_prefixes: tuple[str, ...] = PLUGIN_PACKAGE_PREFIXES
    generator_package: str = "honkit"
    honkit_module: Path | None = None
    npm_command: str = "npm"
    node_command: str = "node"
    install_retries: int = 50
    install_interval: float = 0.1
    log_file: Path | None = dc.field(default_factory=lambda: Path(".tester.log"))
    silent: bool = False


@dc.dataclass(slots=True)
class PageSpec:
    """A book page: ``name`` doubles as the relative path without ``.md``."""

    name: str
    content: str
    level: int = 0


@dc.dataclass(slots=True)
class IncludedFile:
    """An arbitrary file written verbatim into the book directory."""

    path: str
    content: str


@dc.dataclass(slots=True, frozen=True)
class LocalModule:
    """A plugin directory attached by symlink instead of an npm install."""

    directory: Path
    name: str


__all__ = ["IncludedFile", "LocalModule", "PageSpec", "TesterSettings"]
