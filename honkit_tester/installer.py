"""Install HonKit and the plugins named in ``book.json`` into a book.

HonKit is installed by copying an already installed package tree into the
book's ``node_modules`` and, when that is impossible, by ``npm install``.
Registry plugins are installed with ``npm`` under every recognized naming
scheme (``gitbook-plugin-*`` and ``honkit-plugin-*``) because a given plugin
is normally published under only one of them.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
import typing as typ
from pathlib import Path

from ._constants import PACKAGE_JSON_FILENAME
from .book_json import read_book_json
from .build import honkit_entry_point
from .config import TesterSettings
from .errors import InstallationError, ProcessError
from .process import run_command

logger = logging.getLogger(__name__)

_RESOLVE_SCRIPT = "console.log(require.resolve('{package}/package.json'))"


def wait_for_file(path: Path, *, retries: int = 50, interval: float = 0.1) -> Path:
    """Poll until ``path`` exists, checking at most ``retries + 1`` times.

    Raises
    ------
    InstallationError
        If the file is still missing once the retry budget is spent.
    """
    for attempt in range(retries + 1):
        if path.exists():
            return path
        if attempt < retries:
            time.sleep(interval)
    logger.error("File not found: %s", path)
    msg = f"File not found: {path}"
    raise InstallationError(msg)


def _query(command: list[str]) -> str | None:
    try:
        completed = subprocess.run(  # noqa: S603 - argument list, no shell
            command, check=True, capture_output=True, text=True
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("Lookup %s failed: %s", " ".join(command), exc)
        return None
    return completed.stdout.strip() or None


def locate_honkit_module(settings: TesterSettings) -> Path:
    """Return the directory of an installed HonKit package.

    The explicit ``honkit_module`` setting wins; otherwise Node's module
    resolution is asked from the working directory, then the global npm
    root is checked.

    Raises
    ------
    InstallationError
        If no installed HonKit package can be found.
    """
    package = settings.generator_package
    if settings.honkit_module is not None:
        candidate = settings.honkit_module.expanduser().resolve()
        if (candidate / PACKAGE_JSON_FILENAME).is_file():
            return candidate
        msg = f"Configured honkit_module has no {PACKAGE_JSON_FILENAME}: {candidate}"
        raise InstallationError(msg)

    resolved = _query([settings.node_command, "-e", _RESOLVE_SCRIPT.format(package=package)])
    if resolved:
        return Path(resolved).parent

    global_root = _query([settings.npm_command, "root", "-g"])
    if global_root:
        candidate = Path(global_root) / package
        if (candidate / PACKAGE_JSON_FILENAME).is_file():
            return candidate

    msg = f"Unable to locate an installed {package} package"
    raise InstallationError(msg)


def _skip_linked(source: Path, destination: Path) -> typ.Callable[[str, list[str]], set[str]]:
    """Build a ``copytree`` ignore hook for entries linked into ``destination``.

    Local plugins are symlinked into the book before HonKit is copied; copying
    over them would write into the plugin sources.
    """

    def ignore(directory: str, names: list[str]) -> set[str]:
        target = destination / Path(directory).relative_to(source)
        linked = {name for name in names if (target / name).is_symlink()}
        for name in sorted(linked):
            logger.debug("Keeping linked module %s", target / name)
        return linked

    return ignore


def _copy_honkit(book_dir: Path, settings: TesterSettings) -> None:
    source = locate_honkit_module(settings).parent
    destination = honkit_entry_point(book_dir).parents[2]
    logger.info("Installing honkit by copying %s ...", source)
    shutil.copytree(
        source,
        destination,
        symlinks=True,
        dirs_exist_ok=True,
        ignore=_skip_linked(source, destination),
    )


def _npm_install(book_dir: Path, package: str, settings: TesterSettings) -> None:
    run_command(
        settings.npm_command,
        ["install", package, "--prefix", str(book_dir)],
        cwd=book_dir,
    )


def ensure_honkit(book_dir: Path, *, settings: TesterSettings) -> Path:
    """Make sure ``node_modules/honkit/bin/honkit.js`` exists in the book.

    Safe to call repeatedly: once the entry point exists the call returns
    without touching the filesystem.

    Parameters
    ----------
    book_dir : Path
        Book directory created by the scaffolder.
    settings : TesterSettings
        Install commands and the polling budget.

    Returns
    -------
    Path
        ``book_dir``.

    Raises
    ------
    InstallationError
        If both the copy and the npm install fail, or the entry point never
        appears within the polling budget.
    """
    target = honkit_entry_point(book_dir)
    if target.exists():
        logger.info("Honkit already installed")
        return book_dir

    try:
        _copy_honkit(book_dir, settings)
    except (InstallationError, OSError, shutil.Error) as exc:
        logger.error("Honkit installation failed by copying (%s). Attempting npm install ...", exc)
        try:
            _npm_install(book_dir, settings.generator_package, settings)
        except ProcessError as npm_exc:
            logger.error("Honkit installation failed by npm")
            msg = "Honkit installation failed by npm"
            raise InstallationError(msg) from npm_exc
        logger.info("Honkit installation success by npm")
    else:
        logger.info("Honkit installation success by copying")

    wait_for_file(target, retries=settings.install_retries, interval=settings.install_interval)
    return book_dir


def plugin_candidates(name: str, settings: TesterSettings) -> list[str]:
    """Return the npm package names tried for plugin ``name``."""
    return [f"{prefix}{name}" for prefix in settings.plugin_prefixes]


def install_plugins(book_dir: Path, *, settings: TesterSettings) -> Path:
    """Install every plugin listed in the book's ``book.json`` from npm.

    Each plugin is tried under every candidate package name; a failing
    candidate is only logged. Names starting with ``-`` disable a built-in
    plugin and are skipped.

    Raises
    ------
    InstallationError
        If no candidate package could be installed for some plugin.
    """
    plugins = read_book_json(book_dir).get("plugins") or []
    names = [name for name in plugins if isinstance(name, str) and name and not name.startswith("-")]
    if not names:
        return book_dir

    for name in names:
        candidates = plugin_candidates(name, settings)
        installed: list[str] = []
        for package in candidates:
            logger.info("Installing plugin package %s ...", package)
            try:
                _npm_install(book_dir, package, settings)
            except ProcessError as exc:
                logger.warning("Plugin package %s not installed: %s", package, exc)
                continue
            installed.append(package)
        if not installed:
            msg = f"Plugin {name} could not be installed as any of: {', '.join(candidates)}"
            raise InstallationError(msg)
    return book_dir


__all__ = [
    "ensure_honkit",
    "install_plugins",
    "locate_honkit_module",
    "plugin_candidates",
    "wait_for_file",
]
