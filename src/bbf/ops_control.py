from __future__ import annotations

import logging

from .errors import DeclarationError, MalformedConditionError, UnknownTokenError, UnsafeContextError
from .tokens import Abstract, Literal, Math, Max, UnsafeAdd, UnsafeGoto, UnsafeLoop, UnsafeReduce, UnsafeShow, Variable

logger = logging.getLogger(__name__)


class ControlFlowMixin:
    def _resolve_condition(self, condition):
        if not isinstance(condition, (Literal, Variable, Math, Max)):
            raise MalformedConditionError(f"Invalid condition: {condition!r}")
        if isinstance(condition, Variable):
            index = condition.constant_index()
            if index is not None:
                return self._lookup(condition.name, index)
        return self._evaluate(condition)

    def _handle_loop(self, stmt):
        # The body must change the condition cell or the loop never ends.
        cond = self._resolve_condition(stmt.condition)
        self._move_pointer(cond)
        self._emit('[')
        self._compile_block(stmt.body)
        self._move_pointer(cond)
        self._emit(']')
        if self.state.allocator.is_temp(cond):
            self._free_temp(cond)

    def _handle_if(self, stmt):
        """
        Run the body at most once.

        The condition cell is cleared before the closing jump, so the body
        runs once for any non-zero value and the cell reads zero afterwards.
        """
        cond = self._resolve_condition(stmt.condition)
        self._move_pointer(cond)
        self._emit('[')
        self._compile_block(stmt.body)
        self._generate_clear(cond)
        self._emit(']')
        if self.state.allocator.is_temp(cond):
            self._free_temp(cond)

    # ===== Functions =====

    def _handle_function(self, stmt):
        logger.debug("Registering function %s (%d statements)", stmt.name, len(stmt.body))
        self.state.functions.define(stmt.name, stmt.body)

    def _handle_call(self, stmt):
        with self.state.functions.expansion(stmt.name) as body:
            logger.debug("Inlining %s at pointer %d", stmt.name, self.state.current_ptr)
            self._compile_block(body)

    # ===== Unsafe blocks =====

    def _handle_unsafe(self, stmt):
        """
        Compile a raw-pointer block against a reserved, contiguous region.

        The region is zero on entry and is zeroed and released on exit. While
        it is reserved the allocator never hands out any of its cells.
        """
        if stmt.size <= 0:
            raise DeclarationError(f"Unsafe block size must be positive, got {stmt.size}")
        if self.state.unsafe_ptr is not None:
            raise UnsafeContextError("Unsafe blocks cannot be nested")

        allocator = self.state.allocator
        start = allocator.allocate_region(stmt.size)
        self._clear_reused(start, stmt.size)
        for pos in range(start, start + stmt.size):
            allocator.reserve(pos)
        logger.debug("Reserved unsafe region [%d, %d)", start, start + stmt.size)

        self.state.unsafe_region = (start, stmt.size)
        self.state.unsafe_ptr = start
        try:
            self._move_pointer(start)
            self._compile_unsafe_block(stmt.body)

            for pos in range(start, start + stmt.size):
                self._generate_clear(pos)
                allocator.free(pos)
        finally:
            self.state.unsafe_ptr = None
            self.state.unsafe_region = None

    def _require_unsafe(self):
        if self.state.unsafe_ptr is None:
            raise UnsafeContextError("Unsafe operation used outside an unsafe block")
        return self.state.unsafe_ptr

    def _compile_unsafe_block(self, body):
        for stmt in body:
            handler = self._unsafe_handlers().get(type(stmt))
            if handler is None:
                raise UnknownTokenError(f"Unknown unsafe token {type(stmt).__name__}")
            handler(stmt)

    def _unsafe_handlers(self):
        return {
            UnsafeGoto: self._handle_unsafe_goto,
            UnsafeAdd: self._handle_unsafe_add,
            UnsafeReduce: self._handle_unsafe_reduce,
            UnsafeShow: self._handle_unsafe_show,
            UnsafeLoop: self._handle_unsafe_loop,
            Abstract: self._handle_abstract,
        }

    def _handle_unsafe_goto(self, stmt):
        ptr = self._require_unsafe()
        start, size = self.state.unsafe_region
        target = ptr + stmt.offset
        if not start <= target < start + size:
            raise UnsafeContextError(
                f"goto {stmt.offset} leaves the unsafe region (offset {target - start}, size {size})"
            )
        self._move_pointer(target)
        self.state.unsafe_ptr = target

    def _unsafe_drain_amount(self, amount, op):
        ptr = self._require_unsafe()
        amount_pos = self._evaluate(amount)
        tmp = self._copy_cell(amount_pos)
        self._drain(tmp, ptr, op)
        self._free_temp(tmp)
        self._release(amount_pos)

    def _handle_unsafe_add(self, stmt):
        self._unsafe_drain_amount(stmt.amount, '+')

    def _handle_unsafe_reduce(self, stmt):
        self._unsafe_drain_amount(stmt.amount, '-')

    def _handle_unsafe_show(self, stmt):
        self._move_pointer(self._require_unsafe())
        self._emit('.')

    def _handle_unsafe_loop(self, stmt):
        # The loop closes on the cell it opened on, so the body is entered
        # at the same position on every iteration. `loop { goto 1 }` is
        # `[><]`, not a scanning `[>]`.
        entry = self._require_unsafe()
        self._move_pointer(entry)
        self._emit('[')
        self._compile_unsafe_block(stmt.body)
        self._move_pointer(entry)
        self.state.unsafe_ptr = entry
        self._emit(']')

    def _handle_abstract(self, stmt):
        # Verbatim; the tracked pointer is not adjusted for raw moves.
        self._require_unsafe()
        self._emit(stmt.bf)
