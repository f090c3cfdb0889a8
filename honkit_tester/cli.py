"""Cyclopts CLI entrypoint for rendering throwaway HonKit books.

The ``honkit-tester`` console script exposes the fixture builder outside a
test run, which helps when a plugin assertion fails and the rendered markup
needs a closer look. It builds one book from files on disk and lists the
generated files, or prints the extracted content of one of them.

Examples
--------
Render a README with a local plugin and print the index page content:

>>> from honkit_tester.cli import app
>>> app(
...     ["render", "--content", "README.md", "--plugin", ".", "--show", "index.html"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from .builder import BookBuilder
from .config import DEFAULT_SETTINGS_PATH, load_settings

app = App(name="honkit-tester", help="Build HonKit books for plugin tests.")


def _parse_page(option: str) -> tuple[str, Path, int]:
    """Split ``NAME[@LEVEL]=FILE`` into its parts.

    Examples
    --------
    >>> _parse_page("guide/intro@1=docs/intro.md")
    ('guide/intro', PosixPath('docs/intro.md'), 1)
    """
    name, sep, source = option.partition("=")
    if not sep or not name or not source:
        msg = f"Page must look like NAME[@LEVEL]=FILE, got {option!r}"
        raise ValueError(msg)
    level = 0
    if "@" in name:
        name, _, raw_level = name.rpartition("@")
        try:
            level = int(raw_level)
        except ValueError as exc:
            msg = f"Page level must be an integer, got {raw_level!r}"
            raise ValueError(msg) from exc
    return name, Path(source), level


def _parse_file(option: str) -> tuple[str, Path]:
    target, sep, source = option.partition("=")
    if not sep or not target or not source:
        msg = f"File must look like PATH=FILE, got {option!r}"
        raise ValueError(msg)
    return target, Path(source)


@app.command(help="Build a book from local files and list or show its output.")
def render(
    *,
    content: typ.Annotated[
        Path | None, Parameter(help="Markdown file used as README.md")
    ] = None,
    book_json: typ.Annotated[
        Path | None, Parameter(help="JSON file used as book.json")
    ] = None,
    page: typ.Annotated[
        list[str] | None, Parameter(help="Extra page as NAME[@LEVEL]=FILE (repeatable)")
    ] = None,
    plugin: typ.Annotated[
        list[Path] | None, Parameter(help="Local plugin directory (repeatable)")
    ] = None,
    local_dir: typ.Annotated[
        list[Path] | None, Parameter(help="Directory linked into the book root (repeatable)")
    ] = None,
    file: typ.Annotated[
        list[str] | None, Parameter(help="Extra file as PATH=FILE (repeatable)")
    ] = None,
    show: typ.Annotated[
        str | None, Parameter(help="Print the content of this output path")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="TOML file holding a [tool.honkit-tester] table")
    ] = DEFAULT_SETTINGS_PATH,
    quiet: typ.Annotated[
        bool, Parameter(help="Hide log output on the console")
    ] = False,
) -> None:
    """Build one book and report what HonKit produced.

    Parameters
    ----------
    content : Path or None, optional
        Markdown file copied into ``README.md``.
    book_json : Path or None, optional
        JSON document used as ``book.json``.
    page : list[str] or None, optional
        Extra pages written as ``NAME.md``; ``@LEVEL`` sets the summary depth.
    plugin : list[Path] or None, optional
        Plugin directories linked into ``node_modules``.
    local_dir : list[Path] or None, optional
        Directories linked into the book root.
    file : list[str] or None, optional
        Extra files written into the book before the build.
    show : str or None, optional
        Output path whose extracted content is printed instead of the listing.
    config : Path, optional
        Settings file; defaults to ``pyproject.toml``.
    quiet : bool, optional
        Mute console logging for this run, overriding the ``silent`` setting.

    Raises
    ------
    ValueError
        If a page or file option is malformed, or ``show`` names a path the
        build did not produce.
    """
    settings = load_settings(config)
    if quiet:
        settings.silent = True
    book = BookBuilder(settings)
    if content is not None:
        book.with_content(content.read_text(encoding="utf-8"))
    if book_json is not None:
        book.with_book_json(json.loads(book_json.read_text(encoding="utf-8")))
    for option in page or []:
        name, source, level = _parse_page(option)
        book.with_page(name, source.read_text(encoding="utf-8"), level)
    for directory in plugin or []:
        book.with_local_plugin(directory)
    for directory in local_dir or []:
        book.with_local_dir(directory)
    for option in file or []:
        target, source = _parse_file(option)
        book.with_file(target, source.read_text(encoding="utf-8"))

    result = book.create()
    if show is None:
        for path in result.paths():
            print(path)
        return

    entry = result.get(show)
    if entry is None:
        msg = f"The build produced no file at {show!r}"
        raise ValueError(msg)
    print(entry.content)


def main() -> None:
    """Invoke the Cyclopts application behind the ``honkit-tester`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
