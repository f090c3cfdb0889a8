"""Write the book's ``book.json`` with or without locally attached plugins.

Local plugins are linked into ``node_modules`` rather than installed from npm,
so the pipeline writes ``book.json`` twice: first without their names (so the
plugin installer does not try to fetch them from the registry) and then with
their names merged in (so HonKit loads them during the build).
"""

from __future__ import annotations

import copy
import json
import logging
import re
import typing as typ
from pathlib import Path

from ._constants import BOOK_JSON_FILENAME, PLUGIN_PACKAGE_PREFIXES

if typ.TYPE_CHECKING:
    from .config import LocalModule

logger = logging.getLogger(__name__)


def _prefix_pattern(prefixes: typ.Sequence[str]) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(prefix) for prefix in prefixes))


def local_plugin_names(
    modules: typ.Iterable[LocalModule],
    prefixes: typ.Sequence[str] = PLUGIN_PACKAGE_PREFIXES,
) -> list[str]:
    """Return the plugin names HonKit uses for ``modules``.

    The first recognized namespace prefix is removed from each package name,
    so ``honkit-plugin-test`` becomes ``test`` and ``@acme/gitbook-plugin-x``
    becomes ``@acme/x``. Names without a known prefix are returned unchanged.

    Examples
    --------
    >>> from pathlib import Path
    >>> from honkit_tester.config import LocalModule
    >>> local_plugin_names([LocalModule(Path("/p"), "gitbook-plugin-emphasize")])
    ['emphasize']
    """
    if not prefixes:
        return [module.name for module in modules]
    pattern = _prefix_pattern(prefixes)
    return [pattern.sub("", module.name, count=1) for module in modules]


def merge_plugins(
    book_json: typ.Mapping[str, typ.Any] | None,
    local_names: typ.Sequence[str],
    *,
    include_local: bool,
) -> dict[str, typ.Any]:
    """Return a deep copy of ``book_json`` with its plugin list adjusted.

    Parameters
    ----------
    book_json : Mapping or None
        Caller-supplied configuration; ``None`` means "no plugins".
    local_names : Sequence[str]
        Short names of locally attached plugins.
    include_local : bool
        ``False`` removes local names from ``plugins`` (original order kept);
        ``True`` appends missing local names and drops repeated entries,
        keeping the first occurrence of each.
    """
    book: dict[str, typ.Any] = (
        copy.deepcopy(dict(book_json)) if book_json is not None else {"plugins": []}
    )
    plugins = list(book.get("plugins") or [])
    if include_local:
        plugins = list(dict.fromkeys([*plugins, *local_names]))
    else:
        excluded = set(local_names)
        plugins = [plugin for plugin in plugins if plugin not in excluded]
    book["plugins"] = plugins
    return book


def write_book_json(
    book_dir: Path,
    book_json: typ.Mapping[str, typ.Any] | None,
    modules: typ.Sequence[LocalModule],
    *,
    include_local: bool,
    prefixes: typ.Sequence[str] = PLUGIN_PACKAGE_PREFIXES,
) -> Path:
    """Serialize the merged configuration into ``<book_dir>/book.json``.

    Returns
    -------
    Path
        ``book_dir``, so calls can be chained in the build pipeline.
    """
    book = merge_plugins(
        book_json, local_plugin_names(modules, prefixes), include_local=include_local
    )
    logger.debug(
        "Writing %s (%s local plugins): %s",
        BOOK_JSON_FILENAME,
        "with" if include_local else "without",
        book["plugins"],
    )
    (book_dir / BOOK_JSON_FILENAME).write_text(json.dumps(book, indent=2), encoding="utf-8")
    return book_dir


def read_book_json(book_dir: Path) -> dict[str, typ.Any]:
    """Load ``<book_dir>/book.json`` as a mapping."""
    raw = (book_dir / BOOK_JSON_FILENAME).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):  # pragma: no cover - always written as an object
        msg = f"{BOOK_JSON_FILENAME} must contain a JSON object"
        raise TypeError(msg)
    return data


__all__ = ["local_plugin_names", "merge_plugins", "read_book_json", "write_book_json"]
