"""Run-length styled text buffer and the legacy marker-code codec."""

from __future__ import annotations

from typing import TYPE_CHECKING

from quicklime.lib.text.style import PaletteColor, Style, command_from_code

if TYPE_CHECKING:
    from collections.abc import Iterator

SECTION_SIGN = "§"
# One run length must fit in a single byte.
MAX_RUN_LENGTH = 255


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def _check_marker(marker: str) -> str:
    if len(marker) != 1:
        raise ValueError(f"Formatting marker must be a single character, got {marker!r}.")
    return marker


class PlainBuf:
    """Unstyled UTF-8 text annotated with `(byte_length, Style)` runs.

    Run lengths always sum to the encoded text length and every run boundary
    falls on a character boundary. Runs are append-only.
    """

    __slots__ = ("_data", "_runs")

    def __init__(self) -> None:
        self._data = bytearray()
        self._runs: list[tuple[int, Style]] = []

    @classmethod
    def from_formatted(cls, text: str, marker: str = SECTION_SIGN) -> PlainBuf:
        """Decode marker-coded text. Never fails; unknown codes select white."""

        reader = FormatReader(marker)
        reader.append(text)
        return reader.finish()

    def push(self, text: str, style: Style) -> None:
        """Append `text` in `style`.

        Any text is accepted, but the legacy format has no escape for the
        marker, so `to_formatted` rejects buffers whose text contains it.
        """

        encoded = text.encode("utf-8")
        self._data += encoded
        self._break_runs(len(encoded), style)

    def _break_runs(self, length: int, style: Style) -> None:
        end = len(self._data)
        position = end - length
        while position < end:
            chunk = min(MAX_RUN_LENGTH, end - position)
            while position + chunk < end and _is_continuation(self._data[position + chunk]):
                chunk -= 1
            self._runs.append((chunk, style))
            position += chunk

    @property
    def unstyled(self) -> str:
        return self._data.decode("utf-8")

    @property
    def runs(self) -> tuple[tuple[int, Style], ...]:
        """Physical runs as stored, before merging."""

        return tuple(self._runs)

    def iter(self) -> Iterator[tuple[str, Style]]:
        """Yield `(text, style)` pairs, merging adjacent runs of equal style."""

        runs = self._runs
        position = 0
        index = 0
        while index < len(runs):
            length, style = runs[index]
            index += 1
            while index < len(runs) and runs[index][1] == style:
                length += runs[index][0]
                index += 1
            yield self._data[position : position + length].decode("utf-8"), style
            position += length

    def __iter__(self) -> Iterator[tuple[str, Style]]:
        return self.iter()

    def to_formatted(self, marker: str = SECTION_SIGN) -> str:
        """Encode with minimal codes. Raises `ValueError` if the text contains `marker`."""

        writer = FormatWriter(marker)
        for text, style in self.iter():
            writer.write(text, style)
        return writer.getvalue()

    def __str__(self) -> str:
        return self.to_formatted()

    def __repr__(self) -> str:
        return f"PlainBuf({list(self.iter())!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainBuf):
            return NotImplemented
        return list(self.iter()) == list(other.iter())

    __hash__ = None  # type: ignore[assignment]


class FormatReader:
    """Incremental decoder from marker-coded text into a `PlainBuf`."""

    def __init__(self, marker: str = SECTION_SIGN, target: PlainBuf | None = None) -> None:
        self._marker = _check_marker(marker)
        self._target = PlainBuf() if target is None else target
        self._expect_code = False
        self._style = Style()
        self._pending: list[str] = []

    def _flush(self) -> None:
        if self._pending:
            self._target.push("".join(self._pending), self._style)
            self._pending.clear()

    def append(self, text: str) -> None:
        for char in text:
            if self._expect_code:
                command = command_from_code(char)
                if command is None:
                    command = PaletteColor.WHITE
                # Pending text keeps the style that was active before this code.
                self._flush()
                self._style = self._style.apply(command)
                self._expect_code = False
            elif char == self._marker:
                self._expect_code = True
            else:
                self._pending.append(char)

    def finish(self) -> PlainBuf:
        self._flush()
        return self._target


class FormatWriter:
    """Encoder emitting the minimal marker codes between consecutive styles."""

    def __init__(self, marker: str = SECTION_SIGN) -> None:
        self._marker = _check_marker(marker)
        self._style = Style()
        self._parts: list[str] = []

    def write(self, text: str, style: Style) -> None:
        if self._marker in text:
            raise ValueError(
                f"Cannot encode {text!r}: it contains the formatting marker {self._marker!r}."
            )
        for command in self._style.transition(style):
            self._parts.append(self._marker)
            self._parts.append(command.value)
        self._style = style
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)
