"""Unsafe blocks: reserved regions and raw pointer operations."""

import pytest

from bbf import TapeMachine, compile_program, compile_string, run_string
from bbf.errors import DeclarationError, UnknownTokenError, UnsafeContextError
from bbf.tokens import Literal, Show, Unsafe, UnsafeAdd, UnsafeGoto, UnsafeShow


def test_goto_add_show():
    assert run_string("unsafe 3 { add 5 goto 1 add 2 show goto -1 show }") == "25"


def test_reduce():
    assert run_string("unsafe 1 { add 10 reduce 3 show }") == "7"


def test_amount_from_variable_is_not_consumed():
    source = """
    define x
    set x 4
    unsafe 2 { add x add x show }
    show x
    """
    assert run_string(source) == "84"


def test_amount_expression():
    assert run_string("define x\nset x 4\nunsafe 1 { add (math x - 1) show }") == "3"


def test_unsafe_loop_moves_value():
    source = """
    unsafe 2 {
        add 3
        loop {
            reduce 1
            goto 1
            add 2
            goto -1
        }
        goto 1
        show
    }
    """
    assert run_string(source) == "6"


def test_abstract_is_emitted_verbatim():
    result = compile_string("unsafe 1 { abstract +++ . end }")
    assert "+++." in result.bf_code
    assert run_string("unsafe 1 { abstract +++ . end }") == "3"


def test_region_is_zeroed_and_released():
    source = """
    unsafe 2 { add 9 goto 1 add 9 }
    define x
    show x
    """
    result = compile_string(source)
    assert result.variables['x']['pos'] == 0
    assert run_string(source) == "0"


def test_region_skips_named_cells():
    result = compile_string("define a\nunsafe 2 { add 1 }\ndefine b")
    # region took cells 1-2 and was released, so b reuses cell 1
    assert result.variables['b']['pos'] == 1


def test_temporaries_stay_outside_region():
    result = compile_string("unsafe 3 { add 7 }")
    assert result.max_ptr > 3


def test_goto_outside_region_is_rejected():
    with pytest.raises(UnsafeContextError):
        compile_string("unsafe 2 { goto 2 }")
    with pytest.raises(UnsafeContextError):
        compile_string("unsafe 2 { goto -1 }")


def test_unsafe_operation_outside_block():
    with pytest.raises(UnsafeContextError):
        compile_program([UnsafeShow()])
    with pytest.raises(UnsafeContextError):
        compile_program([UnsafeAdd(Literal(1))])


def test_safe_statement_inside_unsafe_block():
    with pytest.raises(UnknownTokenError):
        compile_program([Unsafe(1, (Show(Literal(1)),))])


def test_zero_size_region():
    with pytest.raises(DeclarationError):
        compile_string("unsafe 0 { }")


def test_goto_tracks_unsafe_pointer():
    result = compile_program([Unsafe(3, (UnsafeGoto(2), UnsafeShow(), UnsafeGoto(-2), UnsafeShow()))])
    assert result.bf_code.startswith(">>.<<.")


def test_dump_builtin():
    result = compile_string("define x\nset x 7\n$__dump")
    machine = TapeMachine()
    machine.run(result.bf_code)
    assert machine.dumps[0][0] == 7


def test_region_after_skipped_remove_starts_at_zero():
    source = "define a\nset a 5\ndefine c\nif c { remove a }\nunsafe 1 { show }"
    assert run_string(source) == "0"


def test_unsafe_loop_returns_to_entry_cell():
    result = compile_string("unsafe 2 { loop { goto 1 } }")
    assert result.bf_code.startswith("[><]")
