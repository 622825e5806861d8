"""Parser for one printf/Java-style format command.

Grammar: `%[argument_index$][flags][width][.precision]conversion`, where a
time conversion (`t`/`T`) takes one extra sub-field character.

The leading digit run is ambiguous: it is the argument index when followed by
`$` and the width otherwise. Flags are only read after an explicit index or
when there was no leading number.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum


class ConversionKind(StrEnum):
    BOOL = "bool"
    HASH_CODE = "hash_code"
    STRING = "string"
    UNICODE = "unicode"
    DECIMAL = "decimal"
    OCTAL = "octal"
    HEX = "hex"
    SCI_NOTATION = "sci_notation"
    FLOAT = "float"
    GENERAL = "general"
    HEXFLOAT = "hexfloat"
    TIME = "time"
    PERCENT = "percent"
    NEWLINE = "newline"

    @property
    def is_escape(self) -> bool:
        return self in {ConversionKind.PERCENT, ConversionKind.NEWLINE}

    @property
    def honors_uppercase(self) -> bool:
        return self not in _CASELESS_KINDS

    def character(self, upper: bool = False) -> str:
        lower = _KIND_CHARACTERS[self]
        return lower.upper() if upper and self.honors_uppercase else lower


_CASELESS_KINDS = frozenset(
    {
        ConversionKind.DECIMAL,
        ConversionKind.OCTAL,
        ConversionKind.FLOAT,
        ConversionKind.PERCENT,
        ConversionKind.NEWLINE,
    }
)

_KIND_CHARACTERS: dict[ConversionKind, str] = {
    ConversionKind.BOOL: "b",
    ConversionKind.HASH_CODE: "h",
    ConversionKind.STRING: "s",
    ConversionKind.UNICODE: "c",
    ConversionKind.DECIMAL: "d",
    ConversionKind.OCTAL: "o",
    ConversionKind.HEX: "x",
    ConversionKind.SCI_NOTATION: "e",
    ConversionKind.FLOAT: "f",
    ConversionKind.GENERAL: "g",
    ConversionKind.HEXFLOAT: "a",
    ConversionKind.TIME: "t",
    ConversionKind.PERCENT: "%",
    ConversionKind.NEWLINE: "n",
}

# Conversion character -> (kind, upper). Time is handled separately.
_CONVERSIONS: dict[str, tuple[ConversionKind, bool]] = {
    **{char: (kind, False) for kind, char in _KIND_CHARACTERS.items()},
    **{
        char.upper(): (kind, True)
        for kind, char in _KIND_CHARACTERS.items()
        if kind not in _CASELESS_KINDS
    },
}


class TimeKind(StrEnum):
    """Time sub-field of a `t`/`T` conversion, valued by its character."""

    HOUR_24 = "H"
    HOUR_12 = "I"
    UNPADDED_HOUR_24 = "k"
    UNPADDED_HOUR_12 = "l"
    MINUTE = "M"
    SECOND = "S"
    MILLI = "L"
    NANO = "N"
    MARKER = "p"
    TZ_OFFSET = "z"
    TZ_ABBREV = "Z"
    EPOCH_SECOND = "s"
    EPOCH_MILLI = "Q"


class FormatFlag(Enum):
    """Flag characters, valued by `(character, bit)`."""

    LEFT_JUSTIFY = ("-", 1)
    ALTERNATE = ("#", 2)
    PLUS = ("+", 4)
    LEADING_SPACE = (" ", 8)
    ZERO_PAD = ("0", 16)
    GROUP = (",", 32)
    PARENTHESES = ("(", 64)
    # Meta flag for the index picker; never stored in FormatFlags.
    PREVIOUS_INDEX = ("<", 0)

    @property
    def character(self) -> str:
        return self.value[0]

    @property
    def bit(self) -> int:
        return self.value[1]


_FLAGS_BY_CHARACTER: dict[str, FormatFlag] = {flag.character: flag for flag in FormatFlag}


@dataclass(frozen=True, slots=True, repr=False)
class FormatFlags:
    """The seven storable flags packed into one byte."""

    _bits: int = 0

    def with_flag(self, flag: FormatFlag) -> FormatFlags:
        return FormatFlags(self._bits | flag.bit)

    def __contains__(self, flag: FormatFlag) -> bool:
        return flag.bit != 0 and self._bits & flag.bit == flag.bit

    @property
    def any(self) -> bool:
        return self._bits != 0

    @property
    def left_justify(self) -> bool:
        return FormatFlag.LEFT_JUSTIFY in self

    @property
    def alternate(self) -> bool:
        return FormatFlag.ALTERNATE in self

    @property
    def plus(self) -> bool:
        return FormatFlag.PLUS in self

    @property
    def leading_space(self) -> bool:
        return FormatFlag.LEADING_SPACE in self

    @property
    def zero_pad(self) -> bool:
        return FormatFlag.ZERO_PAD in self

    @property
    def group(self) -> bool:
        return FormatFlag.GROUP in self

    @property
    def parentheses(self) -> bool:
        return FormatFlag.PARENTHESES in self

    def characters(self) -> str:
        return "".join(flag.character for flag in FormatFlag if flag in self)

    def __repr__(self) -> str:
        return f"FormatFlags({self.characters()!r})"


@dataclass(frozen=True, slots=True)
class NextIndex:
    """Take the next implicit argument."""


@dataclass(frozen=True, slots=True)
class ExactIndex:
    """Explicit 1-based argument position (`%2$s`)."""

    position: int


@dataclass(frozen=True, slots=True)
class PreviousIndex:
    """Reuse the previously resolved argument (`%<s`)."""


type ArgIndex = NextIndex | ExactIndex | PreviousIndex

NEXT = NextIndex()
PREVIOUS = PreviousIndex()


@dataclass(frozen=True, slots=True)
class FormatCommand:
    index: ArgIndex
    flags: FormatFlags
    width: int | None
    precision: int | None
    kind: ConversionKind
    upper: bool
    time: TimeKind | None = None

    def __str__(self) -> str:
        parts = ["%"]
        match self.index:
            case ExactIndex(position=position):
                parts.append(f"{position}$")
            case PreviousIndex():
                parts.append("<")
            case NextIndex():
                pass
        parts.append(self.flags.characters())
        if self.width is not None:
            parts.append(str(self.width))
        if self.precision is not None:
            parts.append(f".{self.precision}")
        parts.append(self.kind.character(self.upper))
        if self.time is not None:
            parts.append(self.time.value)
        return "".join(parts)


class ParseErrorCode(StrEnum):
    NOT_FORMAT = "not_format"
    EXPECTED_PRECISION = "expected_precision"
    BAD_CONVERSION = "bad_conversion"
    NO_CONVERSION = "no_conversion"
    DUPLICATE_FLAG = "duplicate_flag"


class FormatParseError(ValueError):
    """Malformed format command syntax."""

    def __init__(
        self,
        code: ParseErrorCode,
        *,
        character: str | None = None,
        flag: FormatFlag | None = None,
    ) -> None:
        self.code = code
        self.character = character
        self.flag = flag
        super().__init__(self._message())

    def _message(self) -> str:
        match self.code:
            case ParseErrorCode.NOT_FORMAT:
                return "tried to parse a format code, but it does not start with '%'"
            case ParseErrorCode.EXPECTED_PRECISION:
                return "found a '.', but there was no precision number afterwards"
            case ParseErrorCode.BAD_CONVERSION:
                return f"unsupported conversion character: {self.character}"
            case ParseErrorCode.NO_CONVERSION:
                return "didn't find a conversion character"
            case ParseErrorCode.DUPLICATE_FLAG:
                name = self.flag.name.lower() if self.flag else "unknown"
                return f"flag specified multiple times: {name} ['{self.character}']"

    @property
    def help(self) -> str | None:
        if self.code is ParseErrorCode.BAD_CONVERSION:
            return (
                "are you sure you don't have any invalid characters in the format code, "
                "as that would result in this error as well?"
            )
        return None


def _take_digits(s: str, pos: int) -> tuple[int | None, int]:
    end = pos
    while end < len(s) and "0" <= s[end] <= "9":
        end += 1
    if end == pos:
        return None, pos
    return int(s[pos:end]), end


def parse_format(s: str, start: int = 0) -> tuple[int, FormatCommand]:
    """Parse the format command beginning at `s[start]`, which must be `%`.

    Returns the number of characters consumed and the parsed command.
    """

    if not s.startswith("%", start):
        raise FormatParseError(ParseErrorCode.NOT_FORMAT)

    leading, pos = _take_digits(s, start + 1)
    was_index = s.startswith("$", pos)

    flags = FormatFlags()
    index: ArgIndex = NEXT
    if was_index or leading is None:
        if was_index:
            pos += 1
        seen: set[FormatFlag] = set()
        while pos < len(s) and (flag := _FLAGS_BY_CHARACTER.get(s[pos])) is not None:
            if flag in seen:
                raise FormatParseError(
                    ParseErrorCode.DUPLICATE_FLAG, character=flag.character, flag=flag
                )
            seen.add(flag)
            flags = flags.with_flag(flag)
            pos += 1

        if FormatFlag.PREVIOUS_INDEX in seen:
            index = PREVIOUS
        elif leading:
            index = ExactIndex(leading)
        width, pos = _take_digits(s, pos)
    else:
        width = leading

    precision: int | None = None
    if s.startswith(".", pos):
        precision, pos = _take_digits(s, pos + 1)
        if precision is None:
            raise FormatParseError(ParseErrorCode.EXPECTED_PRECISION)

    if pos >= len(s):
        raise FormatParseError(ParseErrorCode.NO_CONVERSION)

    conversion = s[pos]
    if conversion in {"t", "T"}:
        sub_field = s[pos + 1] if pos + 1 < len(s) else ""
        try:
            time = TimeKind(sub_field)
        except ValueError:
            raise FormatParseError(
                ParseErrorCode.BAD_CONVERSION, character=conversion
            ) from None
        command = FormatCommand(
            index=index,
            flags=flags,
            width=width,
            precision=precision,
            kind=ConversionKind.TIME,
            upper=conversion == "T",
            time=time,
        )
        return pos + 2 - start, command

    found = _CONVERSIONS.get(conversion)
    if found is None:
        raise FormatParseError(ParseErrorCode.BAD_CONVERSION, character=conversion)
    kind, upper = found
    command = FormatCommand(
        index=index,
        flags=flags,
        width=width,
        precision=precision,
        kind=kind,
        upper=upper,
    )
    return pos + 1 - start, command
