from __future__ import annotations

from .tokens import Literal, PrimitiveType, Variable

NUMERIC_OUTPUT = '.'
CHAR_OUTPUT = '~'
INPUT = ','


class IOOpsMixin:
    def _is_textual(self, value):
        if isinstance(value, Literal):
            return value.is_char
        if isinstance(value, Variable):
            binding = self._lookup_binding(value.name)
            return binding.type is PrimitiveType.CHAR
        return False

    def _handle_show(self, stmt):
        # char-typed variables and character literals use the character output instruction
        pos = self._evaluate(stmt.value)
        self._move_pointer(pos)
        self._emit(CHAR_OUTPUT if self._is_textual(stmt.value) else NUMERIC_OUTPUT)
        self._release(pos)

    def _handle_input(self, stmt):
        self._move_pointer(self._lookup(stmt.name, 0))
        self._emit(INPUT)
