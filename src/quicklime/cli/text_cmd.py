"""CLI command handlers for text.* operations."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Annotated, Any

from cyclopts import Parameter

from quicklime.lib.ops.registry import get_all_operations
from quicklime.lib.ops.text import (
    TextInput,
    text_decode_sync,
    text_encode_sync,
    text_strip_sync,
)

Emitter = Callable[[Any], None]


def _text_decode(
    emit: Emitter,
    text: str,
    marker: Annotated[
        str | None,
        Parameter(name="--marker", help="Formatting marker character."),
    ] = None,
) -> None:
    emit(text_decode_sync(TextInput(text=text, marker=marker)))


def _text_encode(
    emit: Emitter,
    text: str,
    marker: Annotated[
        str | None,
        Parameter(name="--marker", help="Formatting marker character."),
    ] = None,
) -> None:
    emit(text_encode_sync(TextInput(text=text, marker=marker)))


def _text_strip(
    emit: Emitter,
    text: str,
    marker: Annotated[
        str | None,
        Parameter(name="--marker", help="Formatting marker character."),
    ] = None,
) -> None:
    emit(text_strip_sync(TextInput(text=text, marker=marker)))


def register_text_commands(app: Any, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "text.decode": lambda: partial(_text_decode, emit),
        "text.encode": lambda: partial(_text_encode, emit),
        "text.strip": lambda: partial(_text_strip, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_all_operations():
        if op.cli_group != "text":
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
