"""Materialize a minimal HonKit book inside an isolated temporary directory.

The scaffolder writes the three documents HonKit needs to build a book
(``README.md``, ``SUMMARY.md`` and one Markdown file per page) plus any extra
files a test injects. Writes within a stage run on a thread pool; the stage
only returns once every write has settled.

Example
-------
>>> from honkit_tester.config import PageSpec, TesterSettings
>>> from honkit_tester.scaffold import create_book
>>> book = create_book("# Hello", [PageSpec("guide/intro", "Intro")])  # doctest: +SKIP
>>> (book / "guide" / "intro.md").read_text()  # doctest: +SKIP
'Intro'
"""

from __future__ import annotations

import atexit
import concurrent.futures as cf
import logging
import posixpath
import shutil
import tempfile
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader

from ._constants import README_FILENAME, SUMMARY_FILENAME, TEMP_DIR_PREFIX
from .config import IncludedFile, PageSpec
from .errors import ContentError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
SUMMARY_TEMPLATE = "SUMMARY.md.jinja"
SUMMARY_INDENT = 4

_tracked_dirs: list[Path] = []


def _cleanup_tracked_dirs() -> None:
    while _tracked_dirs:
        shutil.rmtree(_tracked_dirs.pop(), ignore_errors=True)


atexit.register(_cleanup_tracked_dirs)


def make_book_dir() -> Path:
    """Allocate a fresh temporary book directory removed at interpreter exit."""
    path = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
    _tracked_dirs.append(path)
    return path


def render_summary(pages: typ.Sequence[PageSpec]) -> str:
    """Render the ``SUMMARY.md`` navigation listing for ``pages``.

    Parameters
    ----------
    pages : Sequence[PageSpec]
        Pages in navigation order; each is indented by four spaces per level.

    Returns
    -------
    str
        Markdown listing an ``Introduction`` entry followed by every page.

    Examples
    --------
    >>> print(render_summary([PageSpec("a", "x"), PageSpec("a/b", "y", 1)]), end="")
    # Summary
    <BLANKLINE>
    * [Introduction](README.md)
    * [a](a.md)
        * [a/b](a/b.md)
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,  # noqa: S701 - renders Markdown, not HTML
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template(SUMMARY_TEMPLATE)
    entries = [
        {"padding": " " * (page.level * SUMMARY_INDENT), "name": page.name}
        for page in pages
    ]
    summary = template.render(readme=README_FILENAME, entries=entries)
    if not summary.strip():  # pragma: no cover - template guard
        msg = "summary content is empty"
        raise ContentError(msg)
    return summary


def _page_path(book_dir: Path, page: PageSpec) -> Path:
    *parents, leaf = page.name.split("/")
    return book_dir.joinpath(*parents) / f"{leaf}.md"


def _write(path: Path, content: str) -> None:
    # exist_ok covers sibling pages racing to create the same directory
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_all(writes: typ.Sequence[tuple[Path, str]]) -> None:
    """Run every write concurrently and re-raise the first failure afterwards."""
    if not writes:
        return
    with cf.ThreadPoolExecutor(max_workers=min(8, len(writes))) as pool:
        futures = [pool.submit(_write, path, content) for path, content in writes]
        cf.wait(futures)
    for future in futures:
        exc = future.exception()
        if exc is not None:
            raise exc


def _validate_pages(pages: typ.Sequence[PageSpec]) -> None:
    for page in pages:
        if not page.name or not page.name.strip("/"):
            msg = "page name is empty"
            raise ContentError(msg)
        if not page.content:
            msg = f"page content is empty: {page.name}"
            raise ContentError(msg)
        if page.level < 0:
            msg = f"page level must be >= 0: {page.name}"
            raise ContentError(msg)


def create_book(content: str | None, pages: typ.Sequence[PageSpec]) -> Path:
    """Create a temporary book holding the root document and pages.

    Parameters
    ----------
    content : str or None
        Markdown written to ``README.md``; ``None`` writes an empty file.
    pages : Sequence[PageSpec]
        Additional pages; names containing ``/`` are nested in directories.

    Returns
    -------
    Path
        The new book directory.

    Raises
    ------
    ContentError
        If a page has an empty name or empty content.
    """
    _validate_pages(pages)
    summary = render_summary(pages)
    book_dir = make_book_dir()
    logger.info("Creating book in %s", book_dir)

    writes = [
        (book_dir / README_FILENAME, content or ""),
        (book_dir / SUMMARY_FILENAME, summary),
    ]
    writes.extend((_page_path(book_dir, page), page.content) for page in pages)
    _write_all(writes)
    return book_dir


def _included_path(book_dir: Path, path: str) -> Path:
    """Map an injected file path onto ``book_dir``.

    A leading ``/`` is treated as the book root. Paths that are empty or climb
    above the root with ``..`` are a :class:`ContentError`.

    Examples
    --------
    >>> _included_path(Path("/book"), "/includes/a.md")
    PosixPath('/book/includes/a.md')
    """
    parts = PurePosixPath(path.replace("\\", "/")).parts
    if parts and parts[0].startswith("/"):
        parts = parts[1:]
    relative = posixpath.normpath("/".join(parts)) if parts else "."
    if relative in {".", ".."} or relative.startswith("../"):
        msg = f"included file must stay inside the book: {path!r}"
        raise ContentError(msg)
    return book_dir.joinpath(*relative.split("/"))


def include_files(book_dir: Path, files: typ.Sequence[IncludedFile]) -> Path:
    """Write caller-supplied files under ``book_dir``, creating directories.

    Raises
    ------
    ContentError
        If a path is empty or points outside ``book_dir``; nothing is
        written in that case.
    """
    writes = [(_included_path(book_dir, item.path), item.content) for item in files]
    for item in files:
        logger.debug("Including file %s", item.path)
    _write_all(writes)
    return book_dir


__all__ = ["create_book", "include_files", "make_book_dir", "render_summary"]
