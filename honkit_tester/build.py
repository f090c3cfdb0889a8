"""Invoke the HonKit binary installed inside a book directory."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ._constants import HONKIT_ENTRY_POINT, NODE_MODULES_DIRNAME, OUTPUT_DIRNAME
from .errors import InstallationError
from .process import run_command

logger = logging.getLogger(__name__)


def honkit_entry_point(book_dir: Path) -> Path:
    """Return ``<book_dir>/node_modules/honkit/bin/honkit.js``."""
    return book_dir.joinpath(NODE_MODULES_DIRNAME, *HONKIT_ENTRY_POINT)


def output_root(book_dir: Path) -> Path:
    """Return the directory HonKit renders the site into."""
    return book_dir / OUTPUT_DIRNAME


def run_honkit_command(book_dir: Path, args: typ.Sequence[str]) -> Path:
    """Run the book's HonKit with ``args`` from inside ``book_dir``.

    Raises
    ------
    InstallationError
        If HonKit is not installed in the book.
    ProcessError
        If HonKit exits with a non-zero status.
    """
    target = honkit_entry_point(book_dir)
    if not target.exists():
        logger.error("Honkit installation failed when trying to run honkit command")
        msg = f"Honkit installation failed when trying to run honkit command: {target} is missing"
        raise InstallationError(msg)
    run_command(target, list(args), cwd=book_dir)
    return book_dir


def build_book(book_dir: Path) -> Path:
    """Render the book into ``<book_dir>/_book``."""
    logger.info("Building book ...")
    return run_honkit_command(book_dir, ["build", str(book_dir)])


__all__ = ["build_book", "honkit_entry_point", "output_root", "run_honkit_command"]
