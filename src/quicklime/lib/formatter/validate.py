"""Semantic validation of parsed format commands.

The parser only rejects malformed syntax. Flag combinations and
kind-specific restrictions are checked here, producing a `FormatTarget` that
describes how a value would be laid out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from quicklime.lib.formatter.command import ConversionKind, FormatFlag

if TYPE_CHECKING:
    from quicklime.lib.formatter.command import FormatCommand


class PaddingStrategy(StrEnum):
    RIGHT_ALIGN = "right_align"  # [  -123]
    LEFT_ALIGN = "left_align"  # [-123  ]
    ZERO_PAD = "zero_pad"  # [-00123]


class Sign(StrEnum):
    MINUS = "minus"  # -num / num
    SURROUND = "surround"  # (num) / num
    POSITIVE_PLUS = "positive_plus"  # -num / +num
    POSITIVE_SPACE = "positive_space"  # -num / " num"


class TransformKind(StrEnum):
    BOOL = "bool"
    DECIMAL = "decimal"
    OCTAL = "octal"
    HEX = "hex"
    GENERAL = "general"
    FLOAT = "float"
    SCI_NOTATION = "sci_notation"
    HEXFLOAT = "hexfloat"


@dataclass(frozen=True, slots=True)
class Transform:
    kind: TransformKind
    radix_prefix: bool = False
    force_decimal: bool = False


class ValidationErrorCode(StrEnum):
    CONFLICTING_FLAGS = "conflicting_flags"
    NO_ALTERNATE = "no_alternate"
    UNSUPPORTED_KIND = "unsupported_kind"
    ESCAPE = "escape"


class FormatValidationError(ValueError):
    """A syntactically valid command whose flags or kind cannot be honoured."""

    def __init__(
        self,
        code: ValidationErrorCode,
        message: str,
        *,
        flags: tuple[FormatFlag, FormatFlag] | None = None,
        kind: ConversionKind | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.flags = flags
        self.kind = kind


def _conflict(first: FormatFlag, second: FormatFlag) -> FormatValidationError:
    return FormatValidationError(
        ValidationErrorCode.CONFLICTING_FLAGS,
        f"flags '{first.character}' and '{second.character}' cannot be combined",
        flags=(first, second),
    )


def _no_alternate(kind: ConversionKind) -> FormatValidationError:
    return FormatValidationError(
        ValidationErrorCode.NO_ALTERNATE,
        f"the '#' flag is not supported for {kind.value} conversions",
        kind=kind,
    )


def _padding(command: FormatCommand) -> PaddingStrategy:
    zero_pad = command.flags.zero_pad
    left_justify = command.flags.left_justify
    if zero_pad and left_justify:
        raise _conflict(FormatFlag.ZERO_PAD, FormatFlag.LEFT_JUSTIFY)
    if zero_pad:
        return PaddingStrategy.ZERO_PAD
    if left_justify:
        return PaddingStrategy.LEFT_ALIGN
    return PaddingStrategy.RIGHT_ALIGN


def _sign(command: FormatCommand) -> Sign:
    flags = command.flags
    if flags.parentheses:
        return Sign.SURROUND
    if flags.plus:
        if flags.leading_space:
            raise _conflict(FormatFlag.PLUS, FormatFlag.LEADING_SPACE)
        return Sign.POSITIVE_PLUS
    if flags.leading_space:
        return Sign.POSITIVE_SPACE
    return Sign.MINUS


def _transform(command: FormatCommand) -> Transform:
    alternate = command.flags.alternate
    kind = command.kind
    match kind:
        case ConversionKind.BOOL | ConversionKind.DECIMAL | ConversionKind.GENERAL:
            if alternate:
                raise _no_alternate(kind)
            return Transform(TransformKind(kind.value))
        case ConversionKind.OCTAL | ConversionKind.HEX:
            return Transform(TransformKind(kind.value), radix_prefix=alternate)
        case ConversionKind.FLOAT | ConversionKind.SCI_NOTATION | ConversionKind.HEXFLOAT:
            return Transform(TransformKind(kind.value), force_decimal=alternate)
        case ConversionKind.PERCENT | ConversionKind.NEWLINE:
            raise FormatValidationError(
                ValidationErrorCode.ESCAPE,
                f"'%{kind.character()}' is an escape, not a value conversion",
                kind=kind,
            )
        case _:
            raise FormatValidationError(
                ValidationErrorCode.UNSUPPORTED_KIND,
                f"{kind.value} conversions are not supported",
                kind=kind,
            )


@dataclass(frozen=True, slots=True)
class FormatTarget:
    """Layout a value would be rendered with."""

    min_width: int
    precision: int | None
    strategy: PaddingStrategy
    sign: Sign
    group: bool
    transform: Transform

    @classmethod
    def from_command(cls, command: FormatCommand) -> FormatTarget:
        return cls(
            min_width=command.width or 0,
            precision=command.precision,
            strategy=_padding(command),
            sign=_sign(command),
            group=command.flags.group,
            transform=_transform(command),
        )
