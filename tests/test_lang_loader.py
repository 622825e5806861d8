from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from quicklime.lib.lang.compiler import ProcessErrorCode
from quicklime.lib.lang.diagnostics import Diagnostic
from quicklime.lib.lang.loader import (
    LineError,
    LineErrorCode,
    load_language,
    load_language_file,
    parse_line,
)

SAMPLE = """\
# Main menu
menu.title=Main Menu
menu.quit=Quit %s?

menu.greeting=Hello, %2$s and %s
"""


def test_parse_line_splits_key_and_value() -> None:
    assert parse_line("a.b=c") == ("a.b", "c")
    assert parse_line("a.b=") == ("a.b", "")
    assert parse_line(" key = value ") == (" key ", " value ")


def test_parse_line_value_ends_at_second_equals() -> None:
    assert parse_line("expr=1+1=2") == ("expr", "1+1")


def test_parse_line_errors() -> None:
    with pytest.raises(LineError) as comment:
        parse_line("# comment=yes")
    assert comment.value.code is LineErrorCode.COMMENT

    with pytest.raises(LineError, match="no '='") as missing:
        parse_line("no value here")
    assert missing.value.code is LineErrorCode.NO_VALUE


def test_load_language_builds_directory() -> None:
    result = load_language(SAMPLE, source="en_us.lang")

    assert result.ok
    assert len(result.directory) == 3
    quit_template = result.directory.get("menu.quit")
    assert quit_template is not None
    assert quit_template.to_template() == "Quit {0}?"
    greeting = result.directory.get("menu.greeting")
    assert greeting is not None
    assert greeting.to_template() == "Hello, {1} and {0}"


def test_load_language_collects_every_error() -> None:
    lines = [
        "ok=fine",
        "broken line",
        "bad=Quit %q",
        "again=%<s",
        "later=still loaded",
    ]

    result = load_language(lines, source="en_us.lang")

    assert not result.ok
    assert sorted(key for key, _ in result.directory.items()) == ["later", "ok"]
    assert [error.line_number for error in result.errors] == [2, 3, 4]
    assert [error.code for error in result.errors] == [
        LineErrorCode.NO_VALUE.value,
        ProcessErrorCode.SYNTAX.value,
        ProcessErrorCode.NO_PREVIOUS_ARGUMENT.value,
    ]


def test_diagnostic_column_points_at_percent() -> None:
    result = load_language(["menu.quit=Quit %q"], source="en_us.lang")

    (error,) = result.errors
    assert error.column == len("menu.quit=Quit ") + 1
    assert error.line == "menu.quit=Quit %q"


def test_diagnostic_column_counts_characters_after_multibyte_text() -> None:
    result = load_language(["size=Größe: %q"])

    (error,) = result.errors
    assert error.column == len("size=Größe: ") + 1
    assert error.render().splitlines()[-2].endswith(" " * len("size=Größe: ") + "^")


def test_blank_lines_are_skipped_without_diagnostics() -> None:
    result = load_language("a=b\n\n   \nc=d")

    assert result.ok
    assert len(result.directory) == 2
    with pytest.raises(LineError) as excinfo:
        parse_line("")
    assert excinfo.value.code is LineErrorCode.NO_VALUE


def test_missing_value_column_is_end_of_line() -> None:
    result = load_language(["lonely"])

    (error,) = result.errors
    assert error.column == len("lonely") + 1
    assert error.source == "<memory>"
    assert error.help is not None


def test_byte_order_mark_and_line_endings_are_stripped() -> None:
    result = load_language(["\ufeffgreeting=Hi\r\n", "farewell=Bye\n"])

    assert result.ok
    assert result.directory.get("greeting") is not None
    farewell = result.directory.get("farewell")
    assert farewell is not None
    assert farewell.literal == "Bye"


def test_load_language_logs_skipped_lines_below_warning() -> None:
    with capture_logs() as captured:
        load_language(["nothing", "bad=%q"], source="x.lang")

    skipped = [entry for entry in captured if entry["event"].startswith("Skipping")]
    assert [entry["line"] for entry in skipped] == [1, 2]
    assert {entry["log_level"] for entry in skipped} == {"info"}
    assert all(entry["source"] == "x.lang" for entry in skipped)
    assert not [entry for entry in captured if entry["log_level"] == "warning"]


def test_load_language_file(tmp_path: Path) -> None:
    path = tmp_path / "de_de.lang"
    path.write_text("menu.size=Größe: %s\n", encoding="utf-8")

    result = load_language_file(path)

    assert result.ok
    size = result.directory.get("menu.size")
    assert size is not None
    assert size.format("10") == "Größe: 10"


def test_load_language_file_with_other_encoding(tmp_path: Path) -> None:
    path = tmp_path / "legacy.lang"
    path.write_bytes("menu.size=Größe\n".encode("latin-1"))

    result = load_language_file(path, encoding="latin-1")

    size = result.directory.get("menu.size")
    assert size is not None
    assert size.literal == "Größe"


def test_diagnostic_render() -> None:
    diagnostic = Diagnostic(
        source="en_us.lang",
        line_number=3,
        column=16,
        line="menu.quit=Quit %q",
        message="unsupported conversion character: q",
        code="syntax",
        help="check the format code",
    )

    assert diagnostic.render() == (
        "error: unsupported conversion character: q\n"
        " --> en_us.lang:3:16\n"
        "  |\n"
        "3 | menu.quit=Quit %q\n"
        "  |                ^\n"
        "  = help: check the format code"
    )


def test_diagnostic_render_keeps_tabs_aligned() -> None:
    diagnostic = Diagnostic(
        source="tabs.lang",
        line_number=12,
        column=4,
        line="a=\t%q",
        message="bad",
        code="syntax",
    )

    lines = diagnostic.render().splitlines()
    assert lines[1] == "  --> tabs.lang:12:4"
    assert lines[3] == "12 | a=\t%q"
    assert lines[4] == "   |   \t^"
    assert len(lines) == 5
