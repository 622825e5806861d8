"""Compile translation templates into a literal plus substitution points.

Only positional string substitution survives compilation: `%s`, `%2$s`,
`%<s` and their uppercase forms. `%%` and `%n` become literal text. Bare
`%d` and `%f` are accepted for compatibility with old translation files and
always refer to the first argument.

Substitution and error offsets count UTF-8 bytes, not characters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from quicklime.lib.formatter.command import (
    ConversionKind,
    ExactIndex,
    FormatParseError,
    NextIndex,
    PreviousIndex,
    parse_format,
)
from quicklime.lib.formatter.validate import FormatTarget, FormatValidationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from quicklime.lib.formatter.command import FormatCommand

_LEGACY_FIRST_ARGUMENT_KINDS = frozenset({ConversionKind.DECIMAL, ConversionKind.FLOAT})


class ProcessErrorCode(StrEnum):
    SYNTAX = "syntax"
    UNSUPPORTED_FLAGS = "unsupported_flags"
    UNSUPPORTED_WIDTH = "unsupported_width"
    UNSUPPORTED_PRECISION = "unsupported_precision"
    UNSUPPORTED_KIND = "unsupported_kind"
    NO_PREVIOUS_ARGUMENT = "no_previous_argument"
    INVALID_FORMAT = "invalid_format"


_HELP: dict[ProcessErrorCode, str] = {
    ProcessErrorCode.UNSUPPORTED_FLAGS: "remove the flags; substitutions are inserted verbatim",
    ProcessErrorCode.UNSUPPORTED_WIDTH: "remove the width; substitutions are inserted verbatim",
    ProcessErrorCode.UNSUPPORTED_PRECISION: (
        "remove the precision; substitutions are inserted verbatim"
    ),
    ProcessErrorCode.UNSUPPORTED_KIND: "use '%s' (or '%S' for uppercase) instead",
    ProcessErrorCode.NO_PREVIOUS_ARGUMENT: (
        "'<' reuses the previous argument, so it cannot appear in the first format code"
    ),
}


class TemplateError(ValueError):
    """Compilation failure at `offset` (a UTF-8 byte index into the source)."""

    def __init__(
        self,
        offset: int,
        code: ProcessErrorCode,
        message: str,
        help: str | None = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.code = code
        self.message = message
        self.help = help

    @classmethod
    def from_parse_error(cls, offset: int, error: FormatParseError) -> TemplateError:
        return cls(offset, ProcessErrorCode.SYNTAX, str(error), error.help)

    @classmethod
    def unsupported(cls, offset: int, code: ProcessErrorCode, message: str) -> TemplateError:
        return cls(offset, code, message, _HELP.get(code))


@dataclass(frozen=True, slots=True)
class Substitution:
    """Insert argument `arg_index` (0-based) at `offset` in the literal."""

    offset: int
    arg_index: int
    upper: bool = False

    def placeholder(self) -> str:
        if self.upper:
            return f"{{{self.arg_index}::to_uppercase}}"
        return f"{{{self.arg_index}}}"


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Fully escaped literal text plus substitutions in source order."""

    literal: str
    commands: tuple[Substitution, ...] = ()

    @property
    def arity(self) -> int:
        """Number of arguments the template reads."""

        return max((command.arg_index + 1 for command in self.commands), default=0)

    def _splice(self, render: Callable[[Substitution], str]) -> str:
        encoded = self.literal.encode("utf-8")
        parts: list[str] = []
        cursor = 0
        for command in self.commands:
            parts.append(encoded[cursor : command.offset].decode("utf-8"))
            parts.append(render(command))
            cursor = command.offset
        parts.append(encoded[cursor:].decode("utf-8"))
        return "".join(parts)

    def to_template(self) -> str:
        """Render `{index}` / `{index::to_uppercase}` placeholders into the literal."""

        return self._splice(Substitution.placeholder)

    def format(self, *args: object) -> str:
        """Substitute `args` directly."""

        def render(command: Substitution) -> str:
            if command.arg_index >= len(args):
                raise ValueError(
                    f"Template reads argument {command.arg_index + 1}, "
                    f"but only {len(args)} were given."
                )
            value = str(args[command.arg_index])
            return value.upper() if command.upper else value

        return self._splice(render)

    def __str__(self) -> str:
        return self.to_template()


class ArgumentResolver:
    """Resolve argument indices across one template scan.

    `head` is the next implicit 1-based index; `last` is the most recently
    resolved one.
    """

    def __init__(self) -> None:
        self.head = 1
        self.last: int | None = None

    def resolve(self, command: FormatCommand, offset: int) -> int:
        """Return the 1-based argument index for `command`."""

        if (
            command.kind in _LEGACY_FIRST_ARGUMENT_KINDS
            and not command.flags.any
            and command.width is None
            and command.precision is None
        ):
            self.last = 1
            return 1

        if command.flags.any:
            raise TemplateError.unsupported(
                offset,
                ProcessErrorCode.UNSUPPORTED_FLAGS,
                f"flags are not currently supported (found '{command.flags.characters()}')",
            )
        if command.width is not None:
            raise TemplateError.unsupported(
                offset,
                ProcessErrorCode.UNSUPPORTED_WIDTH,
                f"width is not currently supported (found {command.width})",
            )
        if command.precision is not None:
            raise TemplateError.unsupported(
                offset,
                ProcessErrorCode.UNSUPPORTED_PRECISION,
                f"precision is not currently supported (found .{command.precision})",
            )
        if command.kind is not ConversionKind.STRING:
            raise TemplateError.unsupported(
                offset,
                ProcessErrorCode.UNSUPPORTED_KIND,
                f"unsupported conversion kind: {command.kind.value} "
                f"('%{command.kind.character(command.upper)}')",
            )

        match command.index:
            case PreviousIndex():
                if self.last is None:
                    raise TemplateError.unsupported(
                        offset,
                        ProcessErrorCode.NO_PREVIOUS_ARGUMENT,
                        "no previous argument to reuse",
                    )
                resolved = self.last
            case ExactIndex(position=position):
                resolved = position
            case NextIndex():
                resolved = self.head
                self.head += 1
        self.last = resolved
        return resolved


def _utf8_length(text: str) -> int:
    return len(text.encode("utf-8"))


def character_index(text: str, byte_offset: int) -> int:
    """Convert a UTF-8 byte offset into `text` to a character index."""

    return len(text.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))


def _scan(source: str) -> Iterator[tuple[str, int, FormatCommand | None]]:
    """Yield `(text, byte_offset, command)` for each format code in `source`.

    `text` is the literal run before the code. The last item carries the
    trailing text and no command.
    """

    source_offset = 0
    pos = 0
    while True:
        percent = source.find("%", pos)
        if percent < 0:
            yield source[pos:], source_offset, None
            return
        text = source[pos:percent]
        source_offset += _utf8_length(text)
        try:
            consumed, command = parse_format(source, percent)
        except FormatParseError as error:
            raise TemplateError.from_parse_error(source_offset, error) from error
        yield text, source_offset, command
        pos = percent + consumed
        source_offset += _utf8_length(source[percent:pos])


def compile_template(source: str) -> CompiledTemplate:
    """Compile one template, raising `TemplateError` on the first bad format code."""

    literal: list[str] = []
    # Byte length of the literal so far.
    length = 0
    commands: list[Substitution] = []
    resolver = ArgumentResolver()

    for text, offset, command in _scan(source):
        literal.append(text)
        length += _utf8_length(text)
        if command is None:
            break

        if command.kind is ConversionKind.NEWLINE:
            literal.append("\n")
            length += 1
            continue
        if command.kind is ConversionKind.PERCENT:
            literal.append("%")
            length += 1
            continue

        arg_index = resolver.resolve(command, offset)
        commands.append(Substitution(offset=length, arg_index=arg_index - 1, upper=command.upper))

    return CompiledTemplate(literal="".join(literal), commands=tuple(commands))


def validate_template(source: str) -> tuple[FormatTarget, ...]:
    """Check the flags of every value conversion in `source`.

    Escapes and string conversions carry no layout and are skipped. The first
    conversion whose flags or kind cannot be honoured raises `TemplateError`
    with code `invalid_format`.
    """

    targets: list[FormatTarget] = []
    for _, offset, command in _scan(source):
        if command is None or command.kind.is_escape or command.kind is ConversionKind.STRING:
            continue
        try:
            targets.append(FormatTarget.from_command(command))
        except FormatValidationError as error:
            raise TemplateError(offset, ProcessErrorCode.INVALID_FORMAT, str(error)) from error
    return tuple(targets)
