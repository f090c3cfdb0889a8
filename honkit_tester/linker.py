"""Attach local plugin and auxiliary directories to a book by symlink.

HonKit resolves plugins through Node's module lookup, so a plugin under test
only has to appear as ``node_modules/<package name>`` inside the book. Linking
instead of copying keeps the test run pointed at the live plugin sources.
"""

from __future__ import annotations

import json
import logging
import os
import typing as typ
from pathlib import Path

from ._constants import NODE_MODULES_DIRNAME, PACKAGE_JSON_FILENAME
from .config import LocalModule
from .errors import InstallationError, ValidationError

logger = logging.getLogger(__name__)


def read_local_module(directory: str | os.PathLike[str]) -> LocalModule:
    """Describe a plugin directory using its ``package.json`` name.

    Raises
    ------
    ValidationError
        If the directory has no ``package.json`` or the manifest lacks a
        ``name``.
    """
    path = Path(os.path.normpath(os.path.abspath(directory)))
    manifest = path / PACKAGE_JSON_FILENAME
    try:
        payload = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        msg = f"Plugin manifest not found: {manifest}"
        raise ValidationError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Plugin manifest is not valid JSON: {manifest}"
        raise ValidationError(msg) from exc

    name = payload.get("name") if isinstance(payload, dict) else None
    if not isinstance(name, str) or not name:
        msg = f"Plugin manifest has no package name: {manifest}"
        raise ValidationError(msg)
    return LocalModule(directory=path, name=name)


def read_local_modules(
    directories: typ.Iterable[str | os.PathLike[str]],
) -> list[LocalModule]:
    """Read the manifest of every local plugin directory, in order."""
    return [read_local_module(directory) for directory in directories]


def attach_local_plugins(book_dir: Path, modules: typ.Sequence[LocalModule]) -> Path:
    """Symlink each module into ``<book_dir>/node_modules/<name>``.

    Scoped names such as ``@acme/honkit-plugin-x`` get their scope directory
    created first. Link failures propagate and earlier links are left in
    place.

    Raises
    ------
    InstallationError
        If ``node_modules`` cannot be created.
    """
    node_modules = book_dir / NODE_MODULES_DIRNAME
    try:
        node_modules.mkdir()
    except FileExistsError:
        pass
    except OSError as exc:
        msg = f"Unable to create {node_modules}: {exc}"
        raise InstallationError(msg) from exc

    for module in modules:
        target = node_modules / module.name
        logger.info("Creating symlink for plugin %s to directory %s", module.name, module.directory)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.symlink_to(module.directory, target_is_directory=True)
    return book_dir


def attach_local_dirs(
    book_dir: Path, directories: typ.Iterable[str | os.PathLike[str]]
) -> Path:
    """Symlink each directory into the book root under its own basename."""
    for directory in directories:
        source = Path(os.path.normpath(os.path.abspath(directory)))
        target = book_dir / source.name
        logger.info("Creating symlink for dir %s to %s", source.name, target)
        target.symlink_to(source, target_is_directory=True)
    return book_dir


__all__ = [
    "attach_local_dirs",
    "attach_local_plugins",
    "read_local_module",
    "read_local_modules",
]
