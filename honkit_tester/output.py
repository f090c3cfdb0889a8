"""Collect HonKit's rendered site into an addressable result container.

:func:`walk_output` lists every file under ``_book``; :func:`process_files`
reads them and, for HTML pages, extracts the inner markup of the first
``<section>`` element, which is where HonKit's default theme renders page
content. The resulting :class:`BookResult` can be indexed like a list or
queried by relative path.

Example
-------
>>> from honkit_tester import builder
>>> result = builder().with_content("Hello").create()  # doctest: +SKIP
>>> result.get("index.html").content  # doctest: +SKIP
'<p>Hello</p>'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import os
import posixpath
import typing as typ
from pathlib import Path

from bs4 import BeautifulSoup

from .errors import OutputMissingError

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"
CONTENT_SELECTOR = "section"


@dc.dataclass(slots=True)
class OutputEntry:
    """A generated file and its (extracted) content.

    Attributes
    ----------
    path : str
        POSIX-style path relative to the output root, e.g. ``"guide/a.html"``.
    content : str
        For HTML pages the trimmed inner markup of the first ``<section>``;
        for any other file its raw text.
    soup : BeautifulSoup | None
        Parsed document for HTML pages, for assertions beyond ``content``.
    """

    path: str
    content: str
    soup: BeautifulSoup | None = None


def normalize_output_path(path: str | os.PathLike[str]) -> str:
    """Return ``path`` in the form used by :attr:`OutputEntry.path`.

    Examples
    --------
    >>> normalize_output_path("./guide//intro.html")
    'guide/intro.html'
    """
    text = os.fspath(path).replace("\\", "/")
    return posixpath.normpath(text)


class BookResult(cabc.Sequence[OutputEntry]):
    """Read-only, list-like view over the files of one build."""

    def __init__(self, root: Path, entries: typ.Iterable[OutputEntry]) -> None:
        self.root = root
        self._entries = list(entries)

    @typ.overload
    def __getitem__(self, index: int) -> OutputEntry: ...

    @typ.overload
    def __getitem__(self, index: slice) -> list[OutputEntry]: ...

    def __getitem__(self, index: int | slice) -> OutputEntry | list[OutputEntry]:
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"BookResult(root={self.root!s}, entries={len(self._entries)})"

    def paths(self) -> list[str]:
        """Return every relative path, in index order."""
        return [entry.path for entry in self._entries]

    def get(self, path: str | os.PathLike[str]) -> OutputEntry | None:
        """Return the entry at ``path`` or ``None`` when the build made no such file."""
        wanted = normalize_output_path(path)
        return next((entry for entry in self._entries if entry.path == wanted), None)


def walk_output(output_root: Path) -> list[Path]:
    """Return every regular file under ``output_root``, sorted by path.

    Raises
    ------
    OutputMissingError
        If ``output_root`` does not exist, which usually means the build
        failed before writing anything.
    """
    if not output_root.exists():
        logger.error("not exist: %s", output_root)
        msg = f"Target not found: {output_root}"
        raise OutputMissingError(msg)
    return sorted(path for path in output_root.rglob("*") if path.is_file())


def _extract_content(soup: BeautifulSoup) -> str:
    region = soup.select_one(CONTENT_SELECTOR)
    if region is None:
        return ""
    return region.decode_contents().strip()


def read_entry(output_root: Path, file_path: Path) -> OutputEntry:
    """Read ``file_path`` into an :class:`OutputEntry` relative to ``output_root``."""
    # errors="replace" keeps fonts and images from aborting the run
    text = file_path.read_text(encoding="utf-8", errors="replace")
    relative = normalize_output_path(file_path.relative_to(output_root))
    if file_path.suffix == HTML_SUFFIX:
        soup = BeautifulSoup(text, "html.parser")
        return OutputEntry(path=relative, content=_extract_content(soup), soup=soup)
    return OutputEntry(path=relative, content=text)


def process_files(output_root: Path, files: typ.Iterable[Path]) -> BookResult:
    """Read ``files`` into a :class:`BookResult` rooted at ``output_root``."""
    logger.debug("Processing files ...")
    return BookResult(output_root, (read_entry(output_root, path) for path in files))


__all__ = [
    "BookResult",
    "OutputEntry",
    "normalize_output_path",
    "process_files",
    "read_entry",
    "walk_output",
]
