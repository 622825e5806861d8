"""Styled text operations over marker-coded strings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from quicklime.lib.formatting import columns
from quicklime.lib.ops._runtime import resolve_config
from quicklime.lib.ops.registry import OperationSpec, operation
from quicklime.lib.text.plain import PlainBuf

if TYPE_CHECKING:
    from quicklime.lib.formatting import FormatContext
    from quicklime.lib.text.style import Style


@dataclass(frozen=True, slots=True)
class TextInput:
    text: str = ""
    marker: str | None = None
    root: str | None = None


@dataclass(frozen=True, slots=True)
class StyledRun:
    """One merged run of equally styled text."""

    text: str
    style: str
    color: str | None = None
    flags: tuple[str, ...] = ()
    foreground: str | None = None

    @classmethod
    def from_style(cls, text: str, style: Style) -> StyledRun:
        return cls(
            text=text,
            style=style.describe(),
            color=None if style.color is None else style.color.name.lower(),
            flags=tuple(flag.name.lower() for flag in style.flags),
            foreground=None if style.color is None else style.color.foreground.hex(),
        )


@dataclass(frozen=True, slots=True)
class TextDecodeOutput:
    unstyled: str
    runs: tuple[StyledRun, ...] = ()

    def format_text(self, ctx: FormatContext | None = None) -> str:
        if not self.runs:
            return "(empty)"
        if ctx is not None and ctx.verbose:
            return columns(
                [[repr(run.text), run.style, run.foreground or "default"] for run in self.runs]
            )
        return columns([[repr(run.text), run.style] for run in self.runs])


@dataclass(frozen=True, slots=True)
class TextEncodeOutput:
    formatted: str

    def format_text(self, ctx: FormatContext | None = None) -> str:
        return self.formatted


@dataclass(frozen=True, slots=True)
class TextStripOutput:
    unstyled: str

    def format_text(self, ctx: FormatContext | None = None) -> str:
        return self.unstyled


def _marker(payload: TextInput) -> str:
    if payload.marker is not None:
        return payload.marker
    return resolve_config(payload.root).text.marker


def _decode(payload: TextInput) -> tuple[PlainBuf, str]:
    marker = _marker(payload)
    return PlainBuf.from_formatted(payload.text, marker), marker


def text_decode_sync(payload: TextInput) -> TextDecodeOutput:
    buf, _ = _decode(payload)
    return TextDecodeOutput(
        unstyled=buf.unstyled,
        runs=tuple(StyledRun.from_style(text, style) for text, style in buf),
    )


def text_encode_sync(payload: TextInput) -> TextEncodeOutput:
    buf, marker = _decode(payload)
    return TextEncodeOutput(formatted=buf.to_formatted(marker))


def text_strip_sync(payload: TextInput) -> TextStripOutput:
    buf, _ = _decode(payload)
    return TextStripOutput(unstyled=buf.unstyled)


operation(
    OperationSpec[TextInput, TextDecodeOutput](
        name="text.decode",
        handler=text_decode_sync,
        input_type=TextInput,
        output_type=TextDecodeOutput,
        cli_group="text",
        cli_name="decode",
        description="Split formatted text into styled runs.",
    )
)

operation(
    OperationSpec[TextInput, TextEncodeOutput](
        name="text.encode",
        handler=text_encode_sync,
        input_type=TextInput,
        output_type=TextEncodeOutput,
        cli_group="text",
        cli_name="encode",
        description="Re-encode formatted text with the minimal set of codes.",
    )
)

operation(
    OperationSpec[TextInput, TextStripOutput](
        name="text.strip",
        handler=text_strip_sync,
        input_type=TextInput,
        output_type=TextStripOutput,
        cli_group="text",
        cli_name="strip",
        description="Remove every formatting code from text.",
    )
)
