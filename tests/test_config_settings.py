from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quicklime.lib.config import LangConfig, QuicklimeConfig, TextConfig, load_config
from quicklime.lib.config._paths import resolve_root


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("QUICKLIME_MARKER", "QUICKLIME_LANG_ENCODING", "QUICKLIME_ROOT"):
        monkeypatch.delenv(name, raising=False)


def _install_config(root: Path, content: str) -> None:
    config_path = root / ".quicklime" / "config.toml"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content, encoding="utf-8")


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    loaded = load_config(tmp_path)

    assert loaded == QuicklimeConfig()
    assert loaded.text.marker == "§"
    assert loaded.lang.encoding == "utf-8"


def test_load_config_from_toml(tmp_path: Path) -> None:
    _install_config(
        tmp_path,
        "[text]\n"
        "marker = '&'\n"
        "\n"
        "[lang]\n"
        "encoding = ' latin-1 '\n",
    )

    loaded = load_config(tmp_path)

    assert loaded == QuicklimeConfig(
        text=TextConfig(marker="&"),
        lang=LangConfig(encoding="latin-1"),
    )


def test_load_config_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install_config(tmp_path, "[text]\nmarker = '&'\n")
    monkeypatch.setenv("QUICKLIME_MARKER", "$")
    monkeypatch.setenv("QUICKLIME_LANG_ENCODING", "cp1252")

    loaded = load_config(tmp_path)

    assert loaded.text.marker == "$"
    assert loaded.lang.encoding == "cp1252"


def test_load_config_warns_on_unknown_keys(
    caplog: pytest.LogCaptureFixture,
    tmp_path: Path,
) -> None:
    _install_config(
        tmp_path,
        "[text]\n"
        "marker = '&'\n"
        "colour = 'red'\n"
        "\n"
        "[mystery]\n"
        "value = 123\n",
    )
    caplog.set_level(logging.WARNING, logger="quicklime.lib.config.settings")

    loaded = load_config(tmp_path)

    assert loaded.text.marker == "&"
    messages = [record.getMessage() for record in caplog.records]
    assert any("text.colour" in message for message in messages)
    assert any("mystery" in message for message in messages)


def test_load_config_rejects_type_errors(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    _install_config(tmp_path, "[text]\nmarker = 7\n")
    with pytest.raises(ValueError, match=r"text\.marker.*expected str"):
        load_config(tmp_path)

    _install_config(tmp_path, "[text]\nmarker = '&&'\n")
    with pytest.raises(ValueError, match=r"text\.marker.*single character"):
        load_config(tmp_path)

    _install_config(tmp_path, "")
    monkeypatch.setenv("QUICKLIME_LANG_ENCODING", "no-such-codec")
    with pytest.raises(ValueError, match=r"QUICKLIME_LANG_ENCODING.*unknown encoding"):
        load_config(tmp_path)


def test_load_config_rejects_non_table_section(tmp_path: Path) -> None:
    _install_config(tmp_path, "text = 'oops'\n")

    with pytest.raises(ValueError, match="expected table"):
        load_config(tmp_path)


def test_load_config_rejects_invalid_toml(tmp_path: Path) -> None:
    _install_config(tmp_path, "[text\n")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_config(tmp_path)


def test_resolve_root_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    explicit = tmp_path / "explicit"
    from_env = tmp_path / "env"
    marked = tmp_path / "marked"
    nested = marked / "a" / "b"
    (marked / ".quicklime").mkdir(parents=True)
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert resolve_root() == marked.resolve()

    monkeypatch.setenv("QUICKLIME_ROOT", str(from_env))
    assert resolve_root() == from_env.resolve()
    assert resolve_root(explicit) == explicit.resolve()


def test_resolve_root_stops_at_git_marker(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / "sub").mkdir()
    monkeypatch.chdir(repo / "sub")

    assert resolve_root() == repo.resolve()
