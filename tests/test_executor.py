"""The bundled tape machine."""

import pytest

from bbf import ExecutorOptions, TapeMachine, execute
from bbf.errors import BBFExecutionError


def test_numeric_and_character_output():
    assert execute("+++.") == "3"
    assert execute("++++++++[>++++++++<-]>+~") == "A"


def test_cells_wrap_at_bit_width():
    assert execute("-.") == "255"
    assert execute("-.", options=ExecutorOptions(bits=16)) == "65535"
    assert execute("-.", options=ExecutorOptions(bits=1)) == "1"
    assert execute("-+.") == "0"


def test_pointer_wraps_around_tape():
    assert execute("<+.>.", options=ExecutorOptions(tape_size=10)) == "10"


def test_input_modes():
    assert execute(",.", "A") == "65"
    assert execute(",.", "7", ExecutorOptions(number_input=True)) == "7"
    assert execute(",.,.", "x") == "1200"


def test_bad_numeric_input():
    with pytest.raises(BBFExecutionError):
        execute(",", "x", ExecutorOptions(number_input=True))


def test_unmatched_brackets():
    with pytest.raises(BBFExecutionError):
        execute("+[")
    with pytest.raises(BBFExecutionError):
        execute("+]")


def test_step_limit():
    with pytest.raises(BBFExecutionError):
        execute("+[]", options=ExecutorOptions(step_limit=1000))
    assert execute("+++.", options=ExecutorOptions(step_limit=1000)) == "3"


def test_non_program_characters_are_ignored():
    assert execute("hello +. world") == "1"


def test_dump_records_tape():
    machine = TapeMachine()
    assert machine.run("+++>++&") == ""
    assert machine.dumps[0][:3] == [3, 2, 0]


def test_loops_skip_when_zero():
    assert execute("[+++.]++.") == "2"


def test_invalid_configuration():
    with pytest.raises(BBFExecutionError):
        TapeMachine(ExecutorOptions(bits=0))
    with pytest.raises(BBFExecutionError):
        TapeMachine(ExecutorOptions(tape_size=0))
