"""Core quicklime library exports."""

from quicklime.lib.directory import Directory
from quicklime.lib.lang.compiler import CompiledTemplate, compile_template
from quicklime.lib.text.plain import PlainBuf
from quicklime.lib.text.style import PaletteColor, Style, StyleFlags

__all__ = [
    "CompiledTemplate",
    "Directory",
    "PaletteColor",
    "PlainBuf",
    "Style",
    "StyleFlags",
    "compile_template",
]
