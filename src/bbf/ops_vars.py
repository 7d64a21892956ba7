from __future__ import annotations

import logging

from .errors import DeclarationError
from .state import Binding
from .tokens import Literal, Max

logger = logging.getLogger(__name__)


def levenshtein(a: str, b: str) -> int:
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        row = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            row.append(min(prev[j] + 1, row[j - 1] + 1, prev[j - 1] + cost))
        prev = row
    return prev[-1]


class VarsOpsMixin:
    def _suggest_name(self, name):
        best = None
        best_dist = None
        for candidate in sorted(self.state.variables):
            dist = levenshtein(name.lower(), candidate.lower())
            if best_dist is None or dist < best_dist:
                best, best_dist = candidate, dist
        if best is not None and best_dist <= 2:
            return best
        return None

    def _not_declared(self, name):
        suggestion = self._suggest_name(name)
        if suggestion:
            return DeclarationError(f"Variable {name} not declared. Did you mean '{suggestion}'?")
        return DeclarationError(f"Variable {name} not declared")

    def _lookup_binding(self, name):
        binding = self.state.variables.get(name)
        if binding is None:
            raise self._not_declared(name)
        return binding

    def _lookup(self, name, index=0):
        binding = self._lookup_binding(name)
        if not 0 <= index < binding.length:
            raise DeclarationError(
                f"Index {index} out of range for {name} (length {binding.length})"
            )
        return binding.base + index

    def _handle_declare(self, stmt):
        """
        Bind a scalar or an array.

        Scalars take the lowest free cell, zeroed if an earlier statement used
        it. Arrays take the first run of `length` free cells so element i
        always lives at base + i; every element is zeroed.
        Re-declaring a name rebinds it and leaves the old cells allocated.
        """
        allocator = self.state.allocator
        if stmt.name in self.state.variables:
            logger.warning("Variable %s re-declared; previous cells stay allocated", stmt.name)

        if stmt.length is None:
            pos = allocator.allocate_one()
            self._clear_reused(pos)
            allocator.bind(pos, stmt.name, 0, stmt.type)
            self.state.variables[stmt.name] = Binding(pos, 1, stmt.type)
            return

        if stmt.length <= 0:
            raise DeclarationError(f"Array {stmt.name} must have a positive length, got {stmt.length}")

        base = allocator.allocate_region(stmt.length)
        for i in range(stmt.length):
            allocator.bind(base + i, stmt.name, i, stmt.type)
            self._generate_clear(base + i)
        self.state.variables[stmt.name] = Binding(base, stmt.length, stmt.type)

    def _handle_assign(self, stmt):
        target = stmt.target
        index = target.constant_index()
        if index is None:
            self._write_dynamic_index(target.name, target.index, stmt.value)
            return

        dest = self._lookup(target.name, index)
        value = stmt.value

        if isinstance(value, Literal):
            self._generate_set_value(value.value, dest)
            return

        if isinstance(value, Max):
            self._generate_clear(dest)
            self._emit('-')
            return

        src = self._evaluate(value)
        if src == dest:
            return
        if self.state.allocator.is_temp(src):
            self._generate_clear(dest)
            self._drain(src, dest)
            self._free_temp(src)
        else:
            tmp = self._copy_cell(src)
            self._generate_clear(dest)
            self._drain(tmp, dest)
            self._free_temp(tmp)

    def _handle_remove(self, stmt):
        binding = self._lookup_binding(stmt.name)
        for pos in range(binding.base, binding.base + binding.length):
            self._generate_clear(pos)
            self.state.allocator.free(pos)
        del self.state.variables[stmt.name]
