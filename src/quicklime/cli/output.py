"""Write operation results to stdout as text, JSON or porcelain lines."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, cast

from quicklime.lib.formatting import FormatContext, TextFormattable
from quicklime.lib.serialization import to_jsonable

OutputFormat = Literal["text", "json", "porcelain"]
OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("text", "json", "porcelain")


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat
    verbosity: int = 0


def normalize_output_format(
    *,
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool,
) -> OutputFormat:
    """Resolve final output format from flags; `--json` beats `--porcelain`."""

    if json_mode:
        return "json"
    if porcelain_mode:
        return "porcelain"
    normalized = (requested or "text").strip().lower()
    if normalized not in OUTPUT_FORMATS:
        raise SystemExit("--format must be one of: text, json, porcelain")
    return cast("OutputFormat", normalized)


def _porcelain_field(key: str, value: Any) -> str:
    if isinstance(value, (dict, list)):
        value = json.dumps(value, sort_keys=True, ensure_ascii=False)
    return f"{key}={value}"


def porcelain_lines(value: Any) -> list[str]:
    """One line per record, each a tab-separated run of sorted `key=value` fields."""

    payload = to_jsonable(value)
    records = payload if isinstance(payload, list) else [payload]
    lines: list[str] = []
    for record in records:
        if isinstance(record, dict):
            lines.append("\t".join(_porcelain_field(key, record[key]) for key in sorted(record)))
        else:
            lines.append(str(record))
    return lines


def emit(value: Any, config: OutputConfig) -> None:
    """Emit one payload according to the configured output mode."""

    match config.format:
        case "json":
            print(json.dumps(to_jsonable(value), sort_keys=True, ensure_ascii=False))
        case "porcelain":
            for line in porcelain_lines(value):
                print(line)
        case _ if isinstance(value, TextFormattable):
            print(value.format_text(FormatContext(verbosity=config.verbosity)))
        case _:
            print(json.dumps(to_jsonable(value), sort_keys=True, indent=2, ensure_ascii=False))
