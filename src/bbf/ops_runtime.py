from __future__ import annotations


class RuntimeOpsMixin:
    """
    Array access with an index only known at runtime.

    The tape has no indirect addressing, so an access to `name[expr]` is
    unrolled over every element: for each slot the index is compared against
    the slot number and the element access is gated on the result. Each
    dynamic access therefore costs O(length) instructions.
    """

    def _generate_if_index_equals(self, idx_pos, slot, body_fn):
        # Runs body_fn() once if *idx_pos == slot. Does not consume idx_pos.
        probe = self._copy_cell(idx_pos)
        if slot > 0:
            self._move_pointer(probe)
            self._emit('-' * slot)

        guard = self._allocate_temp()
        self._generate_set_value(1, guard)

        # guard stays 1 only if the probe was already zero
        self._move_pointer(probe)
        self._emit('[')
        self._generate_clear(guard)
        self._generate_clear(probe)
        self._emit(']')

        self._move_pointer(guard)
        self._emit('[')
        body_fn()
        self._generate_clear(guard)
        self._emit(']')

        self._free_temp(guard)
        self._free_temp(probe)

    def _apply_runtime_subscript_op(self, binding, idx_pos, per_slot_fn):
        for slot in range(binding.length):
            def _body(slot=slot):
                per_slot_fn(binding.base + slot, slot)

            self._generate_if_index_equals(idx_pos, slot, _body)

    def _read_dynamic_index(self, name, index_expr):
        binding = self._lookup_binding(name)
        idx_pos = self._evaluate(index_expr)

        result = self._allocate_temp()
        self._generate_clear(result)

        def _slot_read(pos, slot):
            self._add_copy(pos, result)

        self._apply_runtime_subscript_op(binding, idx_pos, _slot_read)
        self._release(idx_pos)
        return result

    def _write_dynamic_index(self, name, index_expr, value):
        binding = self._lookup_binding(name)
        idx_pos = self._evaluate(index_expr)
        if not self.state.allocator.is_temp(idx_pos):
            # Snapshot the index so a write to the cell it lives in cannot retarget the scan.
            idx_pos = self._copy_cell(idx_pos)
        value_pos = self._evaluate(value)

        def _slot_write(pos, slot):
            tmp = self._copy_cell(value_pos)
            self._generate_clear(pos)
            self._drain(tmp, pos)
            self._free_temp(tmp)

        self._apply_runtime_subscript_op(binding, idx_pos, _slot_write)
        self._release(value_pos)
        self._release(idx_pos)
