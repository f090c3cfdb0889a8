"""Load honkit-tester settings from the ``[tool.honkit-tester]`` TOML table."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError

from honkit_tester.errors import SettingsError

from .models import TesterSettings

DEFAULT_SETTINGS_PATH = Path("pyproject.toml")
TOOL_TABLE = "honkit-tester"


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> TesterSettings:
    """Read tester settings, falling back to defaults for anything unset.

    Parameters
    ----------
    path : Path, optional
        TOML file holding a ``[tool.honkit-tester]`` table. Defaults to
        ``pyproject.toml`` in the working directory.

    Returns
    -------
    TesterSettings
        Settings with every key present in the table applied. A missing file
        or table yields the defaults.

    Raises
    ------
    SettingsError
        If the file cannot be parsed or a value has the wrong type.

    Examples
    --------
    >>> from pathlib import Path
    >>> load_settings(Path("does-not-exist.toml")).install_retries
    50
    """
    if not path.exists():
        return TesterSettings()

    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as exc:
        msg = f"Unable to parse settings TOML at {path}"
        raise SettingsError(msg) from exc

    tool = document.get("tool")
    table = tool.get(TOOL_TABLE) if tool else None
    if not table:
        return TesterSettings()
    raw: dict[str, typ.Any] = dict(table.unwrap())
    return _build_settings(raw, path=path)


def _build_settings(raw: typ.Mapping[str, typ.Any], *, path: Path) -> TesterSettings:
    base = TesterSettings()
    prefixes = raw.get("plugin_prefixes", list(base.plugin_prefixes))
    if not isinstance(prefixes, list) or not prefixes or not all(
        isinstance(p, str) and p for p in prefixes
    ):
        msg = f"'plugin_prefixes' in {path} must be a non-empty list of non-empty strings"
        raise SettingsError(msg)

    honkit_module = _optional_path(raw, "honkit_module", path=path)
    log_file: Path | None = base.log_file
    if "log_file" in raw:
        log_file = _optional_path(raw, "log_file", path=path)

    return TesterSettings(
        plugin_prefixes=tuple(prefixes),
        generator_package=_expect(raw, "generator_package", str, base.generator_package, path=path),
        honkit_module=honkit_module,
        npm_command=_expect(raw, "npm_command", str, base.npm_command, path=path),
        node_command=_expect(raw, "node_command", str, base.node_command, path=path),
        install_retries=_expect(raw, "install_retries", int, base.install_retries, path=path),
        install_interval=float(
            _expect(raw, "install_interval", (int, float), base.install_interval, path=path)
        ),
        log_file=log_file,
        silent=_expect(raw, "silent", bool, base.silent, path=path),
    )


def _expect(
    raw: typ.Mapping[str, typ.Any],
    key: str,
    kind: type | tuple[type, ...],
    default: typ.Any,
    *,
    path: Path,
) -> typ.Any:
    value = raw.get(key, default)
    # bool is an int subclass; reject it for numeric settings
    if (isinstance(value, bool) and kind is not bool) or not isinstance(value, kind):
        msg = f"'{key}' in {path} has unexpected type {type(value).__name__}"
        raise SettingsError(msg)
    return value


def _optional_path(raw: typ.Mapping[str, typ.Any], key: str, *, path: Path) -> Path | None:
    value = raw.get(key)
    match value:
        case None | "":
            return None
        case str():
            return Path(value)
        case _:
            msg = f"'{key}' in {path} must be a string path"
            raise SettingsError(msg)


__all__ = ["DEFAULT_SETTINGS_PATH", "load_settings"]
