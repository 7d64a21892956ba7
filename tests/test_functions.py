"""Function definition, inlining and the registry."""

import pytest

from bbf import compile_string, run_string
from bbf.errors import RecursiveCallError, UnknownFunctionError
from bbf.registry import FunctionRegistry
from bbf.tokens import Literal, Show


def test_call_matches_inlined_body():
    called = compile_string("function f { show 56 }\n$f").bf_code
    inline = compile_string("show 56").bf_code
    assert called == inline
    assert run_string("function f { show 56 }\n$f") == "56"


def test_function_shares_caller_variables():
    source = """
    define x
    set x 2
    function inc { set x (math x + 1) }
    $inc
    $inc
    show x
    """
    assert run_string(source) == "4"


def test_function_body_declarations_persist():
    source = """
    function setup { define y set y 8 }
    $setup
    show y
    """
    assert run_string(source) == "8"


def test_definition_inside_function_registers_on_call():
    assert run_string("function outer { function inner { show 1 } }\n$outer\n$inner") == "1"


def test_nested_calls():
    assert run_string("function g { show 1 }\nfunction f { $g $g }\n$f") == "11"


def test_call_inside_loop():
    source = """
    define n
    set n 3
    function tick { show n set n (math n - 1) }
    loop n { $tick }
    """
    assert run_string(source) == "321"


def test_undefined_function():
    with pytest.raises(UnknownFunctionError):
        compile_string("$missing")


def test_call_before_definition():
    with pytest.raises(UnknownFunctionError):
        compile_string("$f\nfunction f { show 1 }")


def test_direct_recursion_is_detected():
    with pytest.raises(RecursiveCallError) as info:
        compile_string("function f { $f }\n$f")
    assert 'f -> f' in str(info.value)


def test_mutual_recursion_is_detected():
    with pytest.raises(RecursiveCallError) as info:
        compile_string("function a { $b }\nfunction b { $a }\n$a")
    assert 'a -> b -> a' in str(info.value)


def test_registry_builtins_and_expansion_stack():
    registry = FunctionRegistry()
    assert '__dump' in registry
    body = (Show(Literal(1)),)
    registry.define('f', body)
    assert registry.resolve('f') == body

    with pytest.raises(RuntimeError):
        with registry.expansion('f'):
            assert registry.expanding == ['f']
            raise RuntimeError("boom")
    assert registry.expanding == []
