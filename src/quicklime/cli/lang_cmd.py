"""CLI command handlers for lang.* operations."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Annotated, Any

from cyclopts import Parameter

from quicklime.lib.ops.lang import (
    LangCompileInput,
    LangFileInput,
    LangShowInput,
    lang_check_sync,
    lang_compile_sync,
    lang_list_sync,
    lang_show_sync,
)
from quicklime.lib.ops.registry import get_all_operations

Emitter = Callable[[Any], None]


def _lang_check(
    emit: Emitter,
    path: str,
    encoding: Annotated[
        str | None,
        Parameter(name="--encoding", help="Text encoding of the language file."),
    ] = None,
) -> None:
    result = lang_check_sync(LangFileInput(path=path, encoding=encoding))
    emit(result)
    if not result.ok:
        raise SystemExit(1)


def _lang_show(
    emit: Emitter,
    path: str,
    key: str,
    encoding: Annotated[
        str | None,
        Parameter(name="--encoding", help="Text encoding of the language file."),
    ] = None,
) -> None:
    emit(lang_show_sync(LangShowInput(path=path, key=key, encoding=encoding)))


def _lang_list(
    emit: Emitter,
    path: str,
    encoding: Annotated[
        str | None,
        Parameter(name="--encoding", help="Text encoding of the language file."),
    ] = None,
) -> None:
    emit(lang_list_sync(LangFileInput(path=path, encoding=encoding)))


def _lang_compile(
    emit: Emitter,
    template: str,
    validate: Annotated[
        bool,
        Parameter(
            name="--validate",
            help="Also check flags and kinds of non-string format codes.",
        ),
    ] = False,
) -> None:
    emit(lang_compile_sync(LangCompileInput(template=template, validate=validate)))


def register_lang_commands(app: Any, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "lang.check": lambda: partial(_lang_check, emit),
        "lang.show": lambda: partial(_lang_show, emit),
        "lang.list": lambda: partial(_lang_list, emit),
        "lang.compile": lambda: partial(_lang_compile, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_all_operations():
        if op.cli_group != "lang":
            continue
        handler_factory = handlers.get(op.name)
        if handler_factory is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        handler = handler_factory()
        handler.__name__ = f"cmd_{op.cli_group}_{op.cli_name}"
        app.command(handler, name=op.cli_name, help=op.description)
        registered.add(f"{op.cli_group}.{op.cli_name}")
        descriptions[op.name] = op.description

    return registered, descriptions
