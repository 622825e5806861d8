"""Project-level quicklime config loader.

Reads `<root>/.quicklime/config.toml`, then applies environment overrides:

    [text]
    marker = "§"

    [lang]
    encoding = "utf-8"
"""

from __future__ import annotations

import codecs
import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, cast

from quicklime.lib.text.plain import SECTION_SIGN

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".quicklime"
CONFIG_FILE_NAME = "config.toml"


@dataclass(frozen=True, slots=True)
class TextConfig:
    """Styled text codec settings."""

    marker: str = SECTION_SIGN


@dataclass(frozen=True, slots=True)
class LangConfig:
    """Language file settings."""

    encoding: str = "utf-8"


@dataclass(frozen=True, slots=True)
class QuicklimeConfig:
    text: TextConfig = TextConfig()
    lang: LangConfig = LangConfig()


type _Key = tuple[str, str]

_ENV_OVERRIDE_MAP: dict[str, _Key] = {
    "QUICKLIME_MARKER": ("text", "marker"),
    "QUICKLIME_LANG_ENCODING": ("lang", "encoding"),
}


def config_path(root: Path) -> Path:
    return root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def _coerce_marker(raw_value: object, source: str) -> str:
    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    if len(raw_value) != 1:
        raise ValueError(
            f"Invalid value for '{source}': expected a single character, got {raw_value!r}."
        )
    return raw_value


def _coerce_encoding(raw_value: object, source: str) -> str:
    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    try:
        codecs.lookup(normalized)
    except LookupError as error:
        raise ValueError(
            f"Invalid value for '{source}': unknown encoding {normalized!r}."
        ) from error
    return normalized


_COERCERS: dict[_Key, Callable[[object, str], str]] = {
    ("text", "marker"): _coerce_marker,
    ("lang", "encoding"): _coerce_encoding,
}


def _default_values() -> dict[_Key, str]:
    defaults = QuicklimeConfig()
    return {
        ("text", "marker"): defaults.text.marker,
        ("lang", "encoding"): defaults.lang.encoding,
    }


def _apply_toml_payload(
    *,
    values: dict[_Key, str],
    payload: dict[str, object],
    path: Path,
) -> None:
    for section, raw_section in payload.items():
        if section not in {key_section for key_section, _ in _COERCERS}:
            logger.warning("Ignoring unknown quicklime config key '%s'.", section)
            continue
        if not isinstance(raw_section, dict):
            raise ValueError(f"Invalid value for '{section}' in '{path}': expected table.")
        for name, raw_value in cast("dict[str, object]", raw_section).items():
            coerce = _COERCERS.get((section, name))
            if coerce is None:
                logger.warning("Ignoring unknown quicklime config key '%s.%s'.", section, name)
                continue
            values[(section, name)] = coerce(raw_value, f"{section}.{name}")


def _apply_env_overrides(values: dict[_Key, str]) -> None:
    for env_name, key in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[key] = _COERCERS[key](raw_value, env_name)


def load_config(root: Path) -> QuicklimeConfig:
    """Load `.quicklime/config.toml` under `root` and apply environment overrides."""

    values = _default_values()
    path = config_path(root)
    if path.is_file():
        try:
            payload_obj = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as error:
            raise ValueError(f"Invalid TOML in '{path}': {error}") from error
        _apply_toml_payload(values=values, payload=cast("dict[str, object]", payload_obj), path=path)

    _apply_env_overrides(values)
    return QuicklimeConfig(
        text=TextConfig(marker=values[("text", "marker")]),
        lang=LangConfig(encoding=values[("lang", "encoding")]),
    )
