"""Language files: one `key=value` translation per line.

Lines starting with `#` are comments and blank lines are ignored. Every other
line is split on `=` and its value compiled. A bad line yields a diagnostic
and loading carries on with the next one.

Blank lines are a deliberate leniency: `parse_line("")` itself still fails
with `no_value`, but `load_language` skips whitespace-only lines before
parsing. Skipped entries are logged at info level because the caller already
receives them as diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from quicklime.lib.directory import Directory
from quicklime.lib.lang.compiler import (
    CompiledTemplate,
    TemplateError,
    character_index,
    compile_template,
)
from quicklime.lib.lang.diagnostics import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = structlog.get_logger(__name__)

_BYTE_ORDER_MARK = "\ufeff"


class LineErrorCode(StrEnum):
    COMMENT = "comment"
    NO_VALUE = "no_value"


class LineError(ValueError):
    def __init__(self, code: LineErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code


def parse_line(line: str) -> tuple[str, str]:
    """Split one line into `(key, value)`.

    The value ends at a second `=` if there is one. Surrounding whitespace is
    kept on both halves.
    """

    if line.startswith("#"):
        raise LineError(LineErrorCode.COMMENT, "line is a comment")
    key, separator, rest = line.partition("=")
    if not separator:
        raise LineError(LineErrorCode.NO_VALUE, "expected 'key=value', but found no '='")
    value, _, _ = rest.partition("=")
    return key, value


@dataclass(frozen=True, slots=True)
class LanguageLoadResult:
    directory: Directory[CompiledTemplate]
    errors: tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def load_language(lines: str | Iterable[str], source: str = "<memory>") -> LanguageLoadResult:
    """Compile every entry, collecting one diagnostic per failing line."""

    if isinstance(lines, str):
        lines = lines.splitlines()

    directory: Directory[CompiledTemplate] = Directory()
    errors: list[Diagnostic] = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if line_number == 1:
            line = line.removeprefix(_BYTE_ORDER_MARK)
        if not line.strip():
            continue

        try:
            key, value = parse_line(line)
        except LineError as error:
            if error.code is LineErrorCode.COMMENT:
                continue
            errors.append(
                Diagnostic(
                    source=source,
                    line_number=line_number,
                    column=len(line) + 1,
                    line=line,
                    message=str(error),
                    code=error.code.value,
                    help="translation entries take the form 'key=value'",
                )
            )
            logger.info("Skipping line without a value.", source=source, line=line_number)
            continue

        try:
            template = compile_template(value)
        except TemplateError as error:
            errors.append(
                Diagnostic(
                    source=source,
                    line_number=line_number,
                    column=len(key) + 1 + character_index(value, error.offset) + 1,
                    line=line,
                    message=error.message,
                    code=error.code.value,
                    help=error.help,
                )
            )
            logger.info(
                "Skipping translation that failed to compile.",
                source=source,
                line=line_number,
                key=key,
                code=error.code.value,
            )
            continue

        directory.insert(key, template)

    logger.debug(
        "Loaded language entries.",
        source=source,
        entries=len(directory),
        errors=len(errors),
    )
    return LanguageLoadResult(directory=directory, errors=tuple(errors))


def load_language_file(path: Path, encoding: str = "utf-8") -> LanguageLoadResult:
    with path.open(encoding=encoding) as handle:
        return load_language(handle, source=path.as_posix())
