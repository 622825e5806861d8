"""Text style model and the legacy formatting-code command set.

A `Style` is a palette color (or the renderer's default color) plus five
boolean flags. Legacy formatted text changes style with single-character
commands: `0`-`9`/`a`-`f` select a palette color, `k l m n o` set one flag
each and `r` resets everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import TYPE_CHECKING

from quicklime.lib.color import Rgb

if TYPE_CHECKING:
    from collections.abc import Iterator


class StyleFlag(Enum):
    """One style flag. Definition order is the canonical emission order."""

    BOLD = 1
    UNDERLINE = 2
    ITALIC = 4
    STRIKETHROUGH = 8
    OBFUSCATE = 16


_ALL_FLAG_BITS = 0x1F


@dataclass(frozen=True, slots=True, repr=False)
class StyleFlags:
    """The five style flags packed into a single byte.

    Layout: `[unused x3][obfuscate][strikethrough][italic][underline][bold]`.
    """

    _bits: int = 0

    @classmethod
    def none(cls) -> StyleFlags:
        return cls(0)

    @classmethod
    def all(cls) -> StyleFlags:
        return cls(_ALL_FLAG_BITS)

    @classmethod
    def of(cls, *flags: StyleFlag) -> StyleFlags:
        bits = 0
        for flag in flags:
            bits |= flag.value
        return cls(bits)

    def with_flag(self, flag: StyleFlag, on: bool = True) -> StyleFlags:
        cleared = self._bits & ~flag.value
        return StyleFlags(cleared | flag.value if on else cleared)

    @property
    def any(self) -> bool:
        return self._bits != 0

    @property
    def bold(self) -> bool:
        return StyleFlag.BOLD in self

    @property
    def underline(self) -> bool:
        return StyleFlag.UNDERLINE in self

    @property
    def italic(self) -> bool:
        return StyleFlag.ITALIC in self

    @property
    def strikethrough(self) -> bool:
        return StyleFlag.STRIKETHROUGH in self

    @property
    def obfuscate(self) -> bool:
        return StyleFlag.OBFUSCATE in self

    def __contains__(self, flag: StyleFlag) -> bool:
        return self._bits & flag.value == flag.value

    def __iter__(self) -> Iterator[StyleFlag]:
        return (flag for flag in StyleFlag if flag in self)

    def __or__(self, other: StyleFlags) -> StyleFlags:
        return StyleFlags(self._bits | other._bits)

    def __and__(self, other: StyleFlags) -> StyleFlags:
        return StyleFlags(self._bits & other._bits)

    def __sub__(self, other: StyleFlags) -> StyleFlags:
        return StyleFlags(self._bits & ~other._bits)

    def __repr__(self) -> str:
        names = "|".join(flag.name for flag in self)
        return f"StyleFlags({names or 'none'})"


class PaletteColor(StrEnum):
    """The 16 legacy palette colors, valued by their code character."""

    BLACK = "0"
    DARK_BLUE = "1"
    DARK_GREEN = "2"
    DARK_AQUA = "3"
    DARK_RED = "4"
    DARK_PURPLE = "5"
    GOLD = "6"
    GRAY = "7"
    DARK_GRAY = "8"
    BLUE = "9"
    GREEN = "a"
    AQUA = "b"
    RED = "c"
    LIGHT_PURPLE = "d"
    YELLOW = "e"
    WHITE = "f"

    @property
    def code(self) -> str:
        return self.value

    @property
    def foreground(self) -> Rgb:
        return Rgb(_FOREGROUND[self])

    @property
    def background(self) -> Rgb:
        """Dimmed variant used for text shadows."""

        return Rgb(_BACKGROUND[self])


_FOREGROUND: dict[PaletteColor, int] = {
    PaletteColor.BLACK: 0x000000,
    PaletteColor.DARK_BLUE: 0x0000AA,
    PaletteColor.DARK_GREEN: 0x00AA00,
    PaletteColor.DARK_AQUA: 0x00AAAA,
    PaletteColor.DARK_RED: 0xAA0000,
    PaletteColor.DARK_PURPLE: 0xAA00AA,
    PaletteColor.GOLD: 0xFFAA00,
    PaletteColor.GRAY: 0xAAAAAA,
    PaletteColor.DARK_GRAY: 0x555555,
    PaletteColor.BLUE: 0x5555FF,
    PaletteColor.GREEN: 0x55FF55,
    PaletteColor.AQUA: 0x55FFFF,
    PaletteColor.RED: 0xFF5555,
    PaletteColor.LIGHT_PURPLE: 0xFF55FF,
    PaletteColor.YELLOW: 0xFFFF55,
    PaletteColor.WHITE: 0xFFFFFF,
}

_BACKGROUND: dict[PaletteColor, int] = {
    PaletteColor.BLACK: 0x000000,
    PaletteColor.DARK_BLUE: 0x00002A,
    PaletteColor.DARK_GREEN: 0x002A00,
    PaletteColor.DARK_AQUA: 0x002A2A,
    PaletteColor.DARK_RED: 0x2A0000,
    PaletteColor.DARK_PURPLE: 0x2A002A,
    PaletteColor.GOLD: 0x2A2A00,
    PaletteColor.GRAY: 0x2A2A2A,
    PaletteColor.DARK_GRAY: 0x151515,
    PaletteColor.BLUE: 0x15153F,
    PaletteColor.GREEN: 0x153F15,
    PaletteColor.AQUA: 0x153F3F,
    PaletteColor.RED: 0x3F1515,
    PaletteColor.LIGHT_PURPLE: 0x3F153F,
    PaletteColor.YELLOW: 0x3F3F15,
    PaletteColor.WHITE: 0x3F3F3F,
}


class StyleCode(StrEnum):
    """Non-color commands, valued by their code character."""

    OBFUSCATE = "k"
    BOLD = "l"
    STRIKETHROUGH = "m"
    UNDERLINE = "n"
    ITALIC = "o"
    RESET = "r"


type StyleCommand = PaletteColor | StyleCode

_FLAG_CODES: dict[StyleFlag, StyleCode] = {
    StyleFlag.BOLD: StyleCode.BOLD,
    StyleFlag.UNDERLINE: StyleCode.UNDERLINE,
    StyleFlag.ITALIC: StyleCode.ITALIC,
    StyleFlag.STRIKETHROUGH: StyleCode.STRIKETHROUGH,
    StyleFlag.OBFUSCATE: StyleCode.OBFUSCATE,
}
_CODE_FLAGS: dict[StyleCode, StyleFlag] = {code: flag for flag, code in _FLAG_CODES.items()}

_COMMANDS_BY_CODE: dict[str, StyleCommand] = {
    **{color.value: color for color in PaletteColor},
    **{code.value: code for code in StyleCode},
}


def command_from_code(code: str) -> StyleCommand | None:
    """Look up the command for one code character, or None if unknown."""

    return _COMMANDS_BY_CODE.get(code)


def command_code(command: StyleCommand) -> str:
    return command.value


def affected_flags(command: StyleCommand) -> StyleFlags:
    """Flags a command touches: all of them for color/reset, itself otherwise."""

    if isinstance(command, PaletteColor) or command is StyleCode.RESET:
        return StyleFlags.all()
    return StyleFlags.of(_CODE_FLAGS[command])


@dataclass(frozen=True, slots=True)
class Style:
    """Color plus flags. `color=None` means the renderer's default color."""

    color: PaletteColor | None = None
    flags: StyleFlags = StyleFlags()

    def apply(self, command: StyleCommand) -> Style:
        if isinstance(command, PaletteColor):
            return Style(color=command)
        if command is StyleCode.RESET:
            return Style()
        return Style(color=self.color, flags=self.flags.with_flag(_CODE_FLAGS[command]))

    def will_reset(self, target: Style) -> bool:
        """Whether moving to `target` needs a reset, i.e. some flag must turn off."""

        return self.color != target.color or (self.flags | target.flags) != target.flags

    def transition(self, target: Style) -> list[StyleCommand]:
        """Minimal command sequence that turns this style into `target`."""

        if self == target:
            return []
        if self.will_reset(target):
            commands: list[StyleCommand] = [StyleCode.RESET]
            if target.color is not None:
                commands.append(target.color)
            commands.extend(_FLAG_CODES[flag] for flag in target.flags)
            return commands
        return [_FLAG_CODES[flag] for flag in target.flags - self.flags]

    def describe(self) -> str:
        color = "default" if self.color is None else self.color.name.lower()
        flags = ",".join(flag.name.lower() for flag in self.flags)
        return f"{color}+{flags}" if flags else color
