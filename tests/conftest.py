"""Shared fixtures for the honkit-tester test suite.

Besides small settings helpers, this module provides ``fake_honkit_module``:
an installed-looking ``honkit`` package whose ``bin/honkit.js`` is a Python
script. It renders ``README.md`` and every page into ``_book`` and expands
``{% include %}`` tags and the fixture plugin's ``{% test %}`` block, which
lets the whole pipeline run without Node.js.
"""

from __future__ import annotations

import shutil
import stat
import sys
import textwrap
from pathlib import Path

import pytest

from honkit_tester.config import TesterSettings
from honkit_tester.errors import InstallationError
from honkit_tester.installer import locate_honkit_module
from honkit_tester.log import reset_logging

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

FAKE_HONKIT_SCRIPT = textwrap.dedent(
    """\
    import html
    import json
    import os
    import re
    import sys
    from pathlib import Path

    INCLUDE = re.compile(r'\\{% include "(.+?)" %\\}')
    TEST_BLOCK = re.compile(r"\\{% test %\\}.*?\\{% endtest %\\}", re.DOTALL)

    command, book = sys.argv[1], Path(sys.argv[2])
    if command != "build":
        sys.exit(2)
    print("info: fake honkit building", book)
    config = json.loads((book / "book.json").read_text(encoding="utf-8"))
    plugin_ready = "test" in config["plugins"] and (
        book / "node_modules" / "honkit-plugin-test" / "package.json"
    ).exists()

    def render(text):
        text = INCLUDE.sub(lambda m: (book / m.group(1)).read_text(encoding="utf-8"), text)
        if plugin_ready:
            text = TEST_BLOCK.sub("from plugin!", text)
        body = f"<p>{html.escape(text.strip(), quote=False)}</p>" if text.strip() else ""
        return f"<html><body><nav>menu</nav><section>\\n{body}\\n</section></body></html>"

    out = book / "_book"
    for root, dirs, files in os.walk(book):
        dirs[:] = [d for d in dirs if d not in ("_book", "node_modules")]
        for name in files:
            source = Path(root) / name
            relative = source.relative_to(book)
            if source.suffix != ".md" or relative.name == "SUMMARY.md":
                continue
            target = out / ("index.html" if relative.name == "README.md" else relative.with_suffix(".html"))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(render(source.read_text(encoding="utf-8")), encoding="utf-8")
    (out / "gitbook").mkdir(parents=True, exist_ok=True)
    (out / "gitbook" / "style.css").write_text("body { margin: 0; }\\n", encoding="utf-8")
    (out / "book.json").write_text(json.dumps(config), encoding="utf-8")
    """
)


@pytest.fixture(autouse=True)
def _isolated_logging() -> object:
    """Detach package log handlers after each test."""
    yield
    reset_logging()


@pytest.fixture
def settings() -> TesterSettings:
    """Settings that never write a log file and poll without sleeping."""
    return TesterSettings(log_file=None, install_retries=2, install_interval=0.0)


@pytest.fixture
def plugin_fixture_dir() -> Path:
    """Directory of the ``honkit-plugin-test`` fixture plugin."""
    return FIXTURES_DIR / "test"


@pytest.fixture
def fake_honkit_module(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Build a ``node_modules/honkit`` tree whose entry point is a Python script."""
    if sys.platform.startswith("win") or " " in sys.executable:  # pragma: no cover
        pytest.skip("fake honkit relies on a POSIX shebang")
    node_modules = tmp_path_factory.mktemp("global") / "node_modules"
    module = node_modules / "honkit"
    (module / "bin").mkdir(parents=True)
    (module / "package.json").write_text('{"name": "honkit"}', encoding="utf-8")
    entry = module / "bin" / "honkit.js"
    entry.write_text(f"#!{sys.executable}\n{FAKE_HONKIT_SCRIPT}", encoding="utf-8")
    entry.chmod(entry.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    (node_modules / "honkit-dep").mkdir()
    (node_modules / "honkit-dep" / "index.js").write_text("module.exports = {};\n", encoding="utf-8")
    return module


@pytest.fixture
def fake_settings(settings: TesterSettings, fake_honkit_module: Path) -> TesterSettings:
    """Settings whose copy install path uses :func:`fake_honkit_module`."""
    settings.honkit_module = fake_honkit_module
    return settings


@pytest.fixture
def honkit_settings(tmp_path: Path) -> TesterSettings:
    """Settings for end-to-end runs; skips unless a real HonKit is installed."""
    if not (shutil.which("node") and shutil.which("npm")):
        pytest.skip("node and npm are required for HonKit end-to-end tests")
    settings = TesterSettings(log_file=tmp_path / "tester.log")
    try:
        locate_honkit_module(settings)
    except InstallationError:
        pytest.skip("HonKit is not installed where node or npm can find it")
    return settings
