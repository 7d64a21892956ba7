from __future__ import annotations

from .errors import UnknownTokenError, UnsupportedOperatorError
from .tokens import Literal, Math, Max, Variable


class ArithOpsMixin:
    def _materialize(self, value):
        pos = self._allocate_temp()
        self._generate_set_value(value, pos)
        return pos

    def _materialize_max(self):
        # Clear then wrap below zero; the result depends on the executor's cell width.
        pos = self._allocate_temp()
        self._generate_clear(pos)
        self._emit('-')
        return pos

    def _add_cells(self, a, b):
        """
        Return a new temporary holding a + b. Both operands are preserved.

            a  b  ca cb t
            10 7  10 7  0
            10 7  0  0  17  <- t is returned
        """
        copied_a = self._copy_cell(a)
        copied_b = self._copy_cell(b)
        result = self._allocate_temp()
        self._generate_clear(result)
        self._drain(copied_a, result)
        self._drain(copied_b, result)
        self._free_temp(copied_a)
        self._free_temp(copied_b)
        return result

    def _subtract_cells(self, a, b):
        """
        Return a new temporary holding a - b. Both operands are preserved.

        The two copies are drained to zero but stay allocated unless the
        compiler was built with free_subtraction_copies=True, so every
        subtraction raises the allocator's high-water mark by two cells.
        """
        copied_a = self._copy_cell(a)
        copied_b = self._copy_cell(b)
        result = self._allocate_temp()
        self._generate_clear(result)
        self._drain(copied_a, result)
        self._drain(copied_b, result, '-')
        if self.free_subtraction_copies:
            self._free_temp(copied_a)
            self._free_temp(copied_b)
        return result

    def _evaluate(self, value):
        """
        Compile `value` and return the address of a cell holding it.

        Literals, `max` and arithmetic produce temporaries the caller must
        release; a plain variable with a constant index resolves to its own
        named cell, which callers must not consume.
        """
        if isinstance(value, Literal):
            return self._materialize(value.value)

        if isinstance(value, Variable):
            index = value.constant_index()
            if index is not None:
                return self._lookup(value.name, index)
            return self._read_dynamic_index(value.name, value.index)

        if isinstance(value, Math):
            if value.operator not in ('+', '-'):
                raise UnsupportedOperatorError(f"Unsupported operator '{value.operator}'")
            a = self._evaluate(value.left)
            b = self._evaluate(value.right)
            if value.operator == '+':
                result = self._add_cells(a, b)
            else:
                result = self._subtract_cells(a, b)
            self._release(b)
            self._release(a)
            return result

        if isinstance(value, Max):
            return self._materialize_max()

        raise UnknownTokenError(f"Unknown value token {type(value).__name__}")
