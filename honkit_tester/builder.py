"""Fluent builder that turns a book description into a rendered HonKit site.

A test describes the book with chained ``with_*`` calls and then calls
:meth:`BookBuilder.create`, which scaffolds a temporary book, links local
plugins, installs HonKit and registry plugins, runs ``honkit build`` and
returns the rendered files as a :class:`~honkit_tester.output.BookResult`.

Example
-------
>>> from honkit_tester import builder
>>> result = (
...     builder()
...     .with_content("This text is {% test %} foobar {% endtest %}")
...     .with_local_plugin("tests/fixtures/test")
...     .create()
... )  # doctest: +SKIP
>>> result.get("index.html").content  # doctest: +SKIP
'<p>This text is from plugin!</p>'
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

from .book_json import write_book_json
from .build import build_book, output_root
from .config import IncludedFile, LocalModule, PageSpec, TesterSettings, load_settings
from .errors import ValidationError
from .installer import ensure_honkit, install_plugins
from .linker import attach_local_dirs, attach_local_plugins, read_local_modules
from .log import configure_logging
from .output import BookResult, process_files, walk_output
from .scaffold import create_book, include_files

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


def execute(
    *,
    content: str,
    book_json: typ.Mapping[str, typ.Any] | None,
    modules: typ.Sequence[LocalModule],
    local_dirs: typ.Sequence[PathLike],
    files: typ.Sequence[IncludedFile],
    pages: typ.Sequence[PageSpec],
    settings: TesterSettings,
) -> BookResult:
    """Run the full scaffold, install, build and collect pipeline.

    Each stage must finish before the next one starts; any failure aborts
    the remaining stages and propagates to the caller.
    """
    prefixes = settings.plugin_prefixes
    book_dir = create_book(content, pages)
    attach_local_plugins(book_dir, modules)
    attach_local_dirs(book_dir, local_dirs)
    write_book_json(book_dir, book_json, modules, include_local=False, prefixes=prefixes)
    ensure_honkit(book_dir, settings=settings)
    install_plugins(book_dir, settings=settings)
    write_book_json(book_dir, book_json, modules, include_local=True, prefixes=prefixes)
    include_files(book_dir, files)
    # second pass: plugin installs may have pruned node_modules
    ensure_honkit(book_dir, settings=settings)
    build_book(book_dir)
    root = output_root(book_dir)
    return process_files(root, walk_output(root))


class BookBuilder:
    """Accumulate a book description; :meth:`create` builds it."""

    def __init__(self, settings: TesterSettings | None = None) -> None:
        self.settings = settings if settings is not None else load_settings()
        self._content = ""
        self._book_json: dict[str, typ.Any] | None = None
        self._modules: list[Path] = []
        self._dirs: list[PathLike] = []
        self._files: list[IncludedFile] = []
        self._pages: list[PageSpec] = []

    def with_content(self, content: str) -> BookBuilder:
        """Set the Markdown of the root ``README.md`` page."""
        self._content = content
        return self

    def with_page(self, name: str, content: str, level: int = 0) -> BookBuilder:
        """Add a page at ``<name>.md``, indented ``level`` deep in the summary."""
        self._pages.append(PageSpec(name=name, content=content, level=level))
        return self

    def with_book_json(self, book_json: typ.Mapping[str, typ.Any]) -> BookBuilder:
        """Use ``book_json`` as the book configuration."""
        self._book_json = dict(book_json)
        return self

    def with_local_plugin(self, directory: PathLike) -> BookBuilder:
        """Attach a plugin from a local directory instead of npm.

        Raises
        ------
        ValidationError
            If ``directory`` does not exist.
        """
        path = Path(directory)
        if not path.exists():
            msg = f"Directory not found: {directory}"
            raise ValidationError(msg)
        self._modules.append(path)
        return self

    def with_local_dir(self, directory: PathLike) -> BookBuilder:
        """Link ``directory`` into the book root under its basename."""
        self._dirs.append(directory)
        return self

    def with_file(self, path: str, content: str) -> BookBuilder:
        """Write ``content`` to ``path`` (relative to the book root) before building."""
        self._files.append(IncludedFile(path=path, content=content))
        return self

    def create(self) -> BookResult:
        """Build the described book and return its rendered files.

        Raises
        ------
        TesterError
            Any pipeline failure, see :mod:`honkit_tester.errors`.
        """
        configure_logging(log_file=self.settings.log_file, silent=self.settings.silent)
        modules = read_local_modules(self._modules)
        return execute(
            content=self._content,
            book_json=self._book_json,
            modules=modules,
            local_dirs=list(self._dirs),
            files=list(self._files),
            pages=list(self._pages),
            settings=self.settings,
        )


def builder(settings: TesterSettings | None = None) -> BookBuilder:
    """Return a fresh :class:`BookBuilder`."""
    return BookBuilder(settings)


__all__ = ["BookBuilder", "builder", "execute"]
