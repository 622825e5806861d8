"""Language file operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from quicklime.lib.formatting import columns, labelled
from quicklime.lib.lang.compiler import (
    CompiledTemplate,
    Substitution,
    TemplateError,
    character_index,
    compile_template,
    validate_template,
)
from quicklime.lib.lang.diagnostics import Diagnostic
from quicklime.lib.lang.loader import load_language_file
from quicklime.lib.ops._runtime import resolve_config
from quicklime.lib.ops.registry import OperationSpec, operation

if TYPE_CHECKING:
    from quicklime.lib.formatting import FormatContext


class DiagnosticError(ValueError):
    """Operation failure that carries a renderable diagnostic."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


@dataclass(frozen=True, slots=True)
class LangFileInput:
    path: str = ""
    encoding: str | None = None
    root: str | None = None


@dataclass(frozen=True, slots=True)
class LangShowInput:
    path: str = ""
    key: str = ""
    encoding: str | None = None
    root: str | None = None


@dataclass(frozen=True, slots=True)
class LangCompileInput:
    template: str = ""
    validate: bool = False


@dataclass(frozen=True, slots=True)
class LangCheckOutput:
    path: str
    entries: int
    errors: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def format_text(self, ctx: FormatContext | None = None) -> str:
        if self.ok:
            return f"{self.path}: ok ({self.entries} entries)"
        rendered = [error.render() for error in self.errors]
        noun = "error" if len(self.errors) == 1 else "errors"
        rendered.append(f"{self.path}: {len(self.errors)} {noun}, {self.entries} entries compiled")
        return "\n\n".join(rendered)


@dataclass(frozen=True, slots=True)
class TemplateOutput:
    """One compiled template as shown to the user."""

    literal: str
    template: str
    arity: int
    substitutions: tuple[Substitution, ...] = ()
    key: str | None = None

    @classmethod
    def from_compiled(cls, compiled: CompiledTemplate, key: str | None = None) -> TemplateOutput:
        return cls(
            literal=compiled.literal,
            template=compiled.to_template(),
            arity=compiled.arity,
            substitutions=compiled.commands,
            key=key,
        )

    def format_text(self, ctx: FormatContext | None = None) -> str:
        pairs: list[tuple[str, object | None]] = [
            ("Key", self.key),
            ("Template", self.template),
            ("Arguments", self.arity),
        ]
        if ctx is not None and ctx.verbose:
            offsets = ", ".join(
                f"{item.placeholder()}@{item.offset}" for item in self.substitutions
            )
            pairs.append(("Literal", repr(self.literal)))
            pairs.append(("Byte offsets", offsets or None))
        return labelled(pairs)


@dataclass(frozen=True, slots=True)
class LangListOutput:
    path: str
    templates: tuple[TemplateOutput, ...] = ()

    def format_text(self, ctx: FormatContext | None = None) -> str:
        if not self.templates:
            return "(no entries)"
        return columns([[item.key or "", item.template] for item in self.templates])


def _encoding(encoding: str | None, root: str | None) -> str:
    if encoding:
        return encoding
    return resolve_config(root).lang.encoding


def _lang_path(raw: str) -> Path:
    if not raw.strip():
        raise ValueError("Language file path must not be empty.")
    path = Path(raw).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Language file not found: {path.as_posix()}")
    return path


def lang_check_sync(payload: LangFileInput) -> LangCheckOutput:
    path = _lang_path(payload.path)
    result = load_language_file(path, encoding=_encoding(payload.encoding, payload.root))
    return LangCheckOutput(
        path=path.as_posix(),
        entries=len(result.directory),
        errors=result.errors,
    )


def lang_show_sync(payload: LangShowInput) -> TemplateOutput:
    key = payload.key.strip()
    if not key:
        raise ValueError("Translation key must not be empty.")
    path = _lang_path(payload.path)
    result = load_language_file(path, encoding=_encoding(payload.encoding, payload.root))
    compiled = result.directory.get(key)
    if compiled is None:
        raise KeyError(f"Translation key '{key}' not found in '{path.as_posix()}'.")
    return TemplateOutput.from_compiled(compiled, key=key)


def lang_list_sync(payload: LangFileInput) -> LangListOutput:
    path = _lang_path(payload.path)
    result = load_language_file(path, encoding=_encoding(payload.encoding, payload.root))
    return LangListOutput(
        path=path.as_posix(),
        templates=tuple(
            TemplateOutput.from_compiled(compiled, key=key)
            for key, compiled in result.directory.items()
        ),
    )


def lang_compile_sync(payload: LangCompileInput) -> TemplateOutput:
    try:
        if payload.validate:
            validate_template(payload.template)
        compiled = compile_template(payload.template)
    except TemplateError as error:
        raise DiagnosticError(
            Diagnostic(
                source="<template>",
                line_number=1,
                column=character_index(payload.template, error.offset) + 1,
                line=payload.template,
                message=error.message,
                code=error.code.value,
                help=error.help,
            )
        ) from error
    return TemplateOutput.from_compiled(compiled)


operation(
    OperationSpec[LangFileInput, LangCheckOutput](
        name="lang.check",
        handler=lang_check_sync,
        input_type=LangFileInput,
        output_type=LangCheckOutput,
        cli_group="lang",
        cli_name="check",
        description="Compile a language file and report every bad entry.",
    )
)

operation(
    OperationSpec[LangShowInput, TemplateOutput](
        name="lang.show",
        handler=lang_show_sync,
        input_type=LangShowInput,
        output_type=TemplateOutput,
        cli_group="lang",
        cli_name="show",
        description="Show one compiled translation by dotted key.",
    )
)

operation(
    OperationSpec[LangFileInput, LangListOutput](
        name="lang.list",
        handler=lang_list_sync,
        input_type=LangFileInput,
        output_type=LangListOutput,
        cli_group="lang",
        cli_name="list",
        description="List every compiled translation key.",
    )
)

operation(
    OperationSpec[LangCompileInput, TemplateOutput](
        name="lang.compile",
        handler=lang_compile_sync,
        input_type=LangCompileInput,
        output_type=TemplateOutput,
        cli_group="lang",
        cli_name="compile",
        description="Compile a single template string.",
    )
)
