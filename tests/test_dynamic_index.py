"""Array access with indices computed at runtime."""

from bbf import compile_string, run_string


def test_dynamic_write_then_read():
    source = """
    define a 5 number
    define i number
    set a[0] 3
    set a[1] 1
    set a[2] 4
    set a[3] 1
    set a[4] 5

    set i 3
    set a[i] 7
    show a[i]
    """
    assert run_string(source) == "7"


def test_dynamic_read_only():
    source = """
    define a 5 number
    define i number
    set a[3] 7
    set i 3
    show a[i]
    """
    assert run_string(source) == "7"


def test_expression_index_read_and_write():
    source = """
    define a 3 number
    define i number
    set a[0] 11
    set a[1] 22
    set a[2] 33
    set i 2
    set a[(math i - 1)] 99
    show a[(math i - 1)]
    show a[0]
    show a[2]
    """
    assert run_string(source) == "991133"


def test_loop_filled_array():
    source = """
    define a 10 number
    define counter number
    set counter 10

    loop counter {
        set counter (math counter - 1)
        set a[counter] counter
    }

    show a[5]
    """
    assert run_string(source) == "5"


def test_every_slot_reads_back():
    values = [3, 1, 4, 1, 5]
    lines = ["define a 5", "define i"]
    lines += [f"set a[{k}] {v}" for k, v in enumerate(values)]
    for k in range(len(values)):
        lines += [f"set i {k}", "show a[i]"]
    assert run_string("\n".join(lines)) == "31415"


def test_index_computed_from_another_array_element():
    source = """
    define a 4
    set a[0] 2
    set a[a[0]] 5
    show a[0]
    show a[2]
    """
    assert run_string(source) == "25"


def test_write_to_the_cell_holding_the_index():
    # a[0] is both the index and the written element; only slot 0 may change
    source = """
    define a 4
    set a[0] 0
    set a[a[0]] 3
    show a[0]
    show a[3]
    """
    assert run_string(source) == "30"


def test_out_of_range_runtime_index_reads_zero():
    source = """
    define a 3
    define i
    set a[0] 1
    set a[1] 1
    set a[2] 1
    set i 9
    show a[i]
    """
    assert run_string(source) == "0"


def test_char_array_dynamic_show():
    source = """
    define s 3 char
    define i
    set s[0] 'o'
    set s[1] 'k'
    set i 1
    show s[i]
    """
    assert run_string(source) == "k"


def test_dynamic_access_cost_grows_with_length():
    def size(n):
        return len(compile_string(f"define a {n}\ndefine i\nshow a[i]").bf_code)

    small, large = size(5), size(10)
    assert large > small
    assert size(20) - large > (large - small)
