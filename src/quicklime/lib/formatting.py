"""Text rendering for operation outputs: the protocol plus layout helpers."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class FormatContext:
    """Knobs passed to `format_text()` implementations.

    `verbosity` is the CLI `-v` count. Verbose output adds the escaped literal,
    byte offsets and color values.
    """

    verbosity: int = 0

    @property
    def verbose(self) -> bool:
        return self.verbosity > 0


@runtime_checkable
class TextFormattable(Protocol):
    """Output dataclasses that know how to print themselves for humans."""

    def format_text(self, ctx: FormatContext | None = None) -> str: ...


def columns(rows: Sequence[Sequence[str]], sep: str = "  ") -> str:
    """Left-align cells into columns.

    >>> columns([["menu.quit", "Quit"], ["menu.options.title", "Options"]])
    'menu.quit           Quit\\nmenu.options.title  Options'
    """

    if not rows:
        return ""
    widths = [max(len(cell) for cell in column) for column in zip_longest(*rows, fillvalue="")]
    return "\n".join(
        sep.join(
            cell.ljust(width) for cell, width in zip_longest(row, widths, fillvalue="")
        ).rstrip()
        for row in rows
    )


def labelled(pairs: Iterable[tuple[str, object | None]]) -> str:
    """Render `Label: value` lines, skipping None values."""

    return "\n".join(f"{label}: {value}" for label, value in pairs if value is not None)
