"""Compile and parse failures, their classes and formatted messages."""

from dataclasses import dataclass

import pytest

from bbf import compile_program, compile_string
from bbf.errors import (
    BBFCompileError,
    BBFParseError,
    DeclarationError,
    MalformedConditionError,
    UnknownTokenError,
    UnsupportedOperatorError,
)
from bbf.tokens import If, Node, Show


def test_undeclared_variable_suggests_close_name():
    with pytest.raises(DeclarationError) as info:
        compile_string("define counter\nshow countr")
    err = info.value
    assert "Did you mean 'counter'?" in str(err)
    assert err.line == 2
    assert ">    2 | show countr" in err.context
    assert str(err).startswith("CompileError:")


def test_undeclared_variable_without_suggestion():
    with pytest.raises(DeclarationError) as info:
        compile_string("define a\nset zzzzz 1")
    assert "Did you mean" not in str(info.value)
    assert "Hint:" in str(info.value)


def test_suggestion_only_within_distance_two():
    with pytest.raises(DeclarationError) as info:
        compile_string("define alpha\nshow alxxxx")
    assert "Did you mean" not in str(info.value)


def test_undeclared_array_in_dynamic_access():
    with pytest.raises(DeclarationError):
        compile_string("define i\nshow arr[i]")
    with pytest.raises(DeclarationError):
        compile_string("define i\nset arr[i] 1")


def test_input_into_undeclared_variable():
    with pytest.raises(DeclarationError):
        compile_string("input x")


def test_multiplication_and_division_are_rejected():
    with pytest.raises(UnsupportedOperatorError):
        compile_string("show (math 2 * 3)")
    with pytest.raises(UnsupportedOperatorError):
        compile_string("define a\nset a (math 6 / 2)")


def test_constant_index_out_of_range():
    with pytest.raises(DeclarationError) as info:
        compile_string("define a 3\nset a[5] 1")
    assert "out of range" in str(info.value)


def test_non_positive_array_length():
    with pytest.raises(DeclarationError):
        compile_string("define a 0")


def test_error_line_of_nested_statement():
    with pytest.raises(DeclarationError) as info:
        compile_string("define x\nset x 1\nif x {\n  show y\n}")
    assert info.value.line == 4


def test_errors_are_compile_errors():
    with pytest.raises(BBFCompileError):
        compile_string("$nothing")


def test_unknown_statement_token():
    @dataclass(frozen=True)
    class Halt(Node):
        pass

    with pytest.raises(UnknownTokenError):
        compile_program([Halt()])


def test_unknown_value_token():
    with pytest.raises(UnknownTokenError):
        compile_program([Show(object())])


def test_malformed_condition():
    with pytest.raises(MalformedConditionError):
        compile_program([If("x")])


def test_parse_error_for_unterminated_block():
    with pytest.raises(BBFParseError) as info:
        compile_string("define x\nloop x {\n  show 1\n")
    assert "not terminated" in str(info.value)
    assert "Hint:" in str(info.value)


def test_parse_error_for_unexpected_character():
    with pytest.raises(BBFParseError) as info:
        compile_string("show 1\nshow @")
    assert info.value.line == 2


def test_parse_error_for_missing_identifier():
    with pytest.raises(BBFParseError):
        compile_string("set 5 5")
