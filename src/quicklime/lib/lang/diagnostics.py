"""Compiler-style diagnostics for language file errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quicklime.lib.formatting import FormatContext


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One error tied to a line of a source file.

    `column` is 1-based and points at the offending character of `line`.
    """

    source: str
    line_number: int
    column: int
    line: str
    message: str
    code: str
    help: str | None = None

    def render(self) -> str:
        """Render as a caret diagnostic, e.g.::

            error: unsupported conversion character: q
             --> en_us.lang:3:11
              |
            3 | menu.quit=Quit %q
              |                ^
              = help: ...
        """

        gutter = " " * len(str(self.line_number))
        # Mirror tabs so the caret stays aligned with the source line.
        lead = "".join("\t" if char == "\t" else " " for char in self.line[: self.column - 1])
        rendered = [
            f"error: {self.message}",
            f"{gutter}--> {self.source}:{self.line_number}:{self.column}",
            f"{gutter} |",
            f"{self.line_number} | {self.line}",
            f"{gutter} | {lead}^",
        ]
        if self.help:
            rendered.append(f"{gutter} = help: {self.help}")
        return "\n".join(rendered)

    def format_text(self, ctx: FormatContext | None = None) -> str:
        return self.render()
