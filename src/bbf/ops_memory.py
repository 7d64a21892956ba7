from __future__ import annotations


class MemoryOpsMixin:
    def _emit(self, code):
        # Never moves the tracked pointer; moves go through _move_pointer.
        self.state.bf_code.append(code)

    def _move_pointer(self, target_pos):
        diff = target_pos - self.state.current_ptr
        if diff > 0:
            self._emit('>' * diff)
        elif diff < 0:
            self._emit('<' * (-diff))
        self.state.current_ptr = target_pos

    def _generate_clear(self, pos=None):
        if pos is not None:
            self._move_pointer(pos)
        self._emit('[-]')

    def _generate_set_value(self, value, pos=None):
        if pos is not None:
            self._move_pointer(pos)
        self._generate_clear()
        value = int(value)
        if value > 0:
            self._emit('+' * value)
        elif value < 0:
            self._emit('-' * (-value))

    def _clear_reused(self, start, count=1):
        # Cells freed inside a branch that never ran may still hold a value;
        # cells past the high-water mark have never been written.
        touched = self.state.allocator.high_water
        for pos in range(start, min(start + count, touched)):
            self._generate_clear(pos)

    def _allocate_temp(self):
        pos = self.state.allocator.allocate_one()
        self.state.allocator.mark_temp(pos)
        return pos

    def _free_temp(self, pos):
        # Caller guarantees the cell already holds zero.
        self.state.allocator.free(pos)

    def _release(self, pos):
        # Clear and free `pos` if it is a temporary; named cells are left alone.
        if self.state.allocator.is_temp(pos):
            self._generate_clear(pos)
            self._free_temp(pos)

    def _drain(self, src_pos, dest_pos, op='+'):
        # dest (op)= src, leaving src at zero.
        self._move_pointer(src_pos)
        self._emit('[')
        self._move_pointer(dest_pos)
        self._emit(op)
        self._move_pointer(src_pos)
        self._emit('-]')

    def _copy_cell(self, src_pos):
        """
        Duplicate `src_pos` into a fresh temporary and return its address.

        The source is drained into two new cells at once, then one of them is
        drained back into the source and freed:

            src  keep  back
            10   0     0
            0    10    10
            10   10    0   <- keep is returned
        """
        keep = self._allocate_temp()
        back = self._allocate_temp()
        self._generate_clear(keep)
        self._generate_clear(back)

        self._move_pointer(src_pos)
        self._emit('[')
        self._move_pointer(keep)
        self._emit('+')
        self._move_pointer(back)
        self._emit('+')
        self._move_pointer(src_pos)
        self._emit('-]')

        self._drain(back, src_pos)
        self._free_temp(back)
        return keep

    def _add_copy(self, src_pos, dest_pos, op='+'):
        # dest (op)= src, preserving src.
        tmp = self._copy_cell(src_pos)
        self._drain(tmp, dest_pos, op)
        self._free_temp(tmp)
