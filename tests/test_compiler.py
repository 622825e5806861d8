from __future__ import annotations

import pytest

from quicklime.lib.formatter.validate import TransformKind
from quicklime.lib.lang.compiler import (
    CompiledTemplate,
    ProcessErrorCode,
    Substitution,
    TemplateError,
    character_index,
    compile_template,
    validate_template,
)


def test_compile_hello() -> None:
    compiled = compile_template("Hello, %s!")

    assert compiled.literal == "Hello, !"
    assert compiled.commands == (Substitution(offset=7, arg_index=0),)
    assert compiled.to_template() == "Hello, {0}!"


def test_template_without_codes_is_pure_literal() -> None:
    compiled = compile_template("Options...")

    assert compiled == CompiledTemplate(literal="Options...")
    assert compiled.arity == 0
    assert str(compiled) == "Options..."


def test_escapes_become_literal_text() -> None:
    compiled = compile_template("100%% done%nnext")

    assert compiled.literal == "100% done\nnext"
    assert compiled.commands == ()


def test_implicit_indices_advance() -> None:
    compiled = compile_template("%s and %s")

    assert [command.arg_index for command in compiled.commands] == [0, 1]
    assert compiled.to_template() == "{0} and {1}"


def test_explicit_index_does_not_advance_head() -> None:
    compiled = compile_template("%2$s and %s")

    assert [command.arg_index for command in compiled.commands] == [1, 0]
    assert compiled.to_template() == "{1} and {0}"
    assert compiled.arity == 2


def test_previous_index_reuses_last_resolved() -> None:
    compiled = compile_template("%2$s, %<s, %s")

    assert [command.arg_index for command in compiled.commands] == [1, 1, 0]


def test_uppercase_string_placeholder() -> None:
    compiled = compile_template("Name: %S")

    assert compiled.commands == (Substitution(offset=6, arg_index=0, upper=True),)
    assert compiled.to_template() == "Name: {0::to_uppercase}"


def test_offsets_account_for_escapes() -> None:
    compiled = compile_template("%%%s%n%s")

    assert compiled.literal == "%\n"
    assert [command.offset for command in compiled.commands] == [1, 2]
    assert compiled.to_template() == "%{0}\n{1}"


def test_offsets_count_utf8_bytes() -> None:
    compiled = compile_template("Größe: %s")

    assert compiled.commands[0].offset == 9
    assert compiled.to_template() == "Größe: {0}"
    assert compiled.format("10") == "Größe: 10"


def test_multibyte_text_between_substitutions() -> None:
    compiled = compile_template("€%s→%S!")

    assert [command.offset for command in compiled.commands] == [3, 6]
    assert compiled.to_template() == "€{0}→{1::to_uppercase}!"
    assert compiled.format("a", "b") == "€a→B!"


def test_error_offsets_count_utf8_bytes() -> None:
    with pytest.raises(TemplateError) as syntax:
        compile_template("é %q")
    with pytest.raises(TemplateError) as unsupported:
        compile_template("日本 %5s")

    assert syntax.value.offset == 3
    assert unsupported.value.offset == 7


@pytest.mark.parametrize(
    ("text", "byte_offset", "expected"),
    (
        ("ascii", 3, 3),
        ("Größe: %s", 9, 7),
        ("日本 %5s", 7, 3),
        ("", 0, 0),
    ),
)
def test_character_index(text: str, byte_offset: int, expected: int) -> None:
    assert character_index(text, byte_offset) == expected


def test_legacy_decimal_and_float_refer_to_first_argument() -> None:
    compiled = compile_template("%s has %d items, %f left")

    assert [command.arg_index for command in compiled.commands] == [0, 0, 0]


def test_legacy_rule_does_not_advance_head() -> None:
    compiled = compile_template("%d then %s then %<s")

    assert [command.arg_index for command in compiled.commands] == [0, 0, 0]


def test_legacy_rule_sets_previous_argument() -> None:
    compiled = compile_template("%2$s %d %<s")

    assert [command.arg_index for command in compiled.commands] == [1, 0, 0]


def test_format_substitutes_arguments() -> None:
    compiled = compile_template("%2$s meets %s (%<S)")

    assert compiled.format("alice", "bob") == "bob meets alice (ALICE)"


def test_format_rejects_missing_arguments() -> None:
    compiled = compile_template("%2$s")

    with pytest.raises(ValueError, match="reads argument 2"):
        compiled.format("only-one")


def test_previous_without_prior_argument_fails() -> None:
    with pytest.raises(TemplateError) as excinfo:
        compile_template("Again: %<s")

    error = excinfo.value
    assert error.code is ProcessErrorCode.NO_PREVIOUS_ARGUMENT
    assert error.offset == 7
    assert error.help is not None


@pytest.mark.parametrize(
    ("source", "code", "message"),
    (
        ("x %-s", ProcessErrorCode.UNSUPPORTED_FLAGS, "flags are not currently supported"),
        ("x %5s", ProcessErrorCode.UNSUPPORTED_WIDTH, "width is not currently supported"),
        ("x %.2s", ProcessErrorCode.UNSUPPORTED_PRECISION, "precision is not currently"),
        ("x %x", ProcessErrorCode.UNSUPPORTED_KIND, r"unsupported conversion kind: hex \('%x'\)"),
        ("x %B", ProcessErrorCode.UNSUPPORTED_KIND, r"bool \('%B'\)"),
        ("x %05d", ProcessErrorCode.UNSUPPORTED_WIDTH, "found 5"),
        ("x %,d", ProcessErrorCode.UNSUPPORTED_FLAGS, "found ','"),
    ),
)
def test_unsupported_features(source: str, code: ProcessErrorCode, message: str) -> None:
    with pytest.raises(TemplateError, match=message) as excinfo:
        compile_template(source)

    assert excinfo.value.code is code
    assert excinfo.value.offset == 2


def test_syntax_errors_are_wrapped_with_offset() -> None:
    with pytest.raises(TemplateError) as excinfo:
        compile_template("ok %s then %q")

    error = excinfo.value
    assert error.code is ProcessErrorCode.SYNTAX
    assert error.offset == 11
    assert "unsupported conversion character: q" in error.message
    assert error.help is not None


def test_trailing_percent_is_a_syntax_error() -> None:
    with pytest.raises(TemplateError, match="didn't find a conversion character"):
        compile_template("100%")


def test_validate_template_checks_value_conversions() -> None:
    targets = validate_template("%s scored %,d (%.1f%%)%n")

    assert [target.transform.kind for target in targets] == [
        TransformKind.DECIMAL,
        TransformKind.FLOAT,
    ]
    assert targets[0].group


@pytest.mark.parametrize(
    ("source", "offset", "message"),
    (
        ("x %-05d", 2, "'0' and '-' cannot be combined"),
        ("ö %#d", 3, "'#' flag is not supported for decimal"),
        ("%s %c", 3, "unicode conversions are not supported"),
    ),
)
def test_validate_template_reports_invalid_codes(source: str, offset: int, message: str) -> None:
    with pytest.raises(TemplateError, match=message) as excinfo:
        validate_template(source)

    assert excinfo.value.code is ProcessErrorCode.INVALID_FORMAT
    assert excinfo.value.offset == offset
