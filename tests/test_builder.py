"""Tests for the fluent builder and the pipeline behind ``create``.

The pipeline tests run against ``fake_honkit_module`` from ``conftest.py``,
so every stage (scaffold, link, install by copy, build, collect) touches the
real filesystem without needing Node.js.
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from honkit_tester import builder
from honkit_tester.config import TesterSettings
from honkit_tester.errors import InstallationError, ValidationError

# the package re-exports the ``builder`` function under the module's name
builder_module = importlib.import_module("honkit_tester.builder")


def test_with_methods_chain(tmp_path: Path, settings: TesterSettings) -> None:
    book = builder(settings)

    assert book.with_content("x") is book
    assert book.with_page("p", "y") is book
    assert book.with_book_json({"plugins": []}) is book
    assert book.with_local_plugin(tmp_path) is book
    assert book.with_local_dir(tmp_path) is book
    assert book.with_file("f.txt", "z") is book


def test_with_local_plugin_rejects_missing_directory(
    tmp_path: Path, settings: TesterSettings
) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(ValidationError, match="Directory not found") as excinfo:
        builder(settings).with_local_plugin(missing)

    assert str(missing) in str(excinfo.value)


def test_builder_loads_settings_when_none_given(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "pyproject.toml").write_text(
        '[tool.honkit-tester]\ninstall_retries = 7\n', encoding="utf-8"
    )

    assert builder().settings.install_retries == 7


def test_create_runs_stages_in_order(
    tmp_path: Path, settings: TesterSettings, mocker: MockerFixture
) -> None:
    calls: list[str] = []
    book_dir = tmp_path / "book"

    def record(name: str, result: object = None) -> object:
        def stage(*_args: object, **_kwargs: object) -> object:
            calls.append(name)
            return result

        return stage

    mocker.patch.object(builder_module, "create_book", side_effect=record("create_book", book_dir))
    for name in (
        "attach_local_plugins",
        "attach_local_dirs",
        "ensure_honkit",
        "install_plugins",
        "include_files",
        "build_book",
        "walk_output",
        "process_files",
    ):
        mocker.patch.object(builder_module, name, side_effect=record(name))
    write = mocker.patch.object(
        builder_module, "write_book_json", side_effect=record("write_book_json")
    )

    builder(settings).with_content("x").create()

    assert calls == [
        "create_book",
        "attach_local_plugins",
        "attach_local_dirs",
        "write_book_json",
        "ensure_honkit",
        "install_plugins",
        "write_book_json",
        "include_files",
        "ensure_honkit",
        "build_book",
        "walk_output",
        "process_files",
    ]
    assert [call.kwargs["include_local"] for call in write.call_args_list] == [False, True]


def test_create_stops_at_first_failure(settings: TesterSettings, mocker: MockerFixture) -> None:
    mocker.patch.object(
        builder_module, "ensure_honkit", side_effect=InstallationError("Honkit installation failed by npm")
    )
    build = mocker.patch.object(builder_module, "build_book")

    with pytest.raises(InstallationError):
        builder(settings).with_content("x").create()

    build.assert_not_called()


def test_create_renders_book_with_fake_honkit(
    fake_settings: TesterSettings, plugin_fixture_dir: Path
) -> None:
    result = (
        builder(fake_settings)
        .with_content('Root {% include "./test/test.md" %}')
        .with_page("second", "Second page")
        .with_page("guide/deep", "Deep page", 1)
        .with_file("snippet.md", "snippet body")
        .with_book_json({"plugins": ["test"], "title": "Fixture"})
        .with_local_plugin(plugin_fixture_dir)
        .with_local_dir(plugin_fixture_dir)
        .create()
    )

    assert result.get("index.html").content == (
        "<p>Root included from user local directory!</p>"
    )
    assert result.get("second.html").content == "<p>Second page</p>"
    assert result.get("guide/deep.html").content == "<p>Deep page</p>"
    assert result.get("snippet.html").content == "<p>snippet body</p>"
    assert result.get("gitbook/style.css") is not None
    assert json.loads(result.get("book.json").content) == {
        "plugins": ["test"],
        "title": "Fixture",
    }


def test_local_plugin_block_is_processed(
    fake_settings: TesterSettings, plugin_fixture_dir: Path
) -> None:
    result = (
        builder(fake_settings)
        .with_content("This text is {% test %} foobar {% endtest %}")
        .with_local_plugin(plugin_fixture_dir)
        .with_book_json({"plugins": ["test"]})
        .create()
    )

    assert result.get("index.html").content == "<p>This text is from plugin!</p>"


def test_empty_builder_produces_empty_index(fake_settings: TesterSettings) -> None:
    result = builder(fake_settings).create()

    assert result.get("index.html").content == ""


def test_builds_are_isolated(fake_settings: TesterSettings) -> None:
    first = builder(fake_settings).with_content("first").create()
    second = builder(fake_settings).with_content("second").create()

    assert first.root != second.root
    assert first.get("index.html").content == "<p>first</p>"
    assert second.get("index.html").content == "<p>second</p>"


def test_create_honours_silent_setting(settings: TesterSettings, mocker: MockerFixture) -> None:
    settings.silent = True
    configure = mocker.patch.object(builder_module, "configure_logging")
    mocker.patch.object(builder_module, "execute")

    builder(settings).create()

    configure.assert_called_once_with(log_file=None, silent=True)
