from __future__ import annotations

import logging

from .errors import BBFCompileError, UnknownTokenError
from .ops_arith import ArithOpsMixin
from .ops_control import ControlFlowMixin
from .ops_io import IOOpsMixin
from .ops_memory import MemoryOpsMixin
from .ops_runtime import RuntimeOpsMixin
from .ops_vars import VarsOpsMixin
from .state import CompilerState
from .tokens import Assign, Call, Declaration, FunctionDef, If, Input, Loop, Remove, Show, Unsafe

logger = logging.getLogger(__name__)


class BBFCompiler(
    MemoryOpsMixin,
    ArithOpsMixin,
    RuntimeOpsMixin,
    VarsOpsMixin,
    IOOpsMixin,
    ControlFlowMixin,
):
    """
    BBF Compiler

    Compiles a parsed BBF program to tape-machine code over the alphabet
    `> < + - . , [ ]`, plus `~` (character output) for the bundled executor.

    Memory Layout:
    - Scalars and temporaries take the lowest free cell
    - Arrays and unsafe regions take the first contiguous run of free cells
    - Every free cell holds zero at runtime

    Code Generation Strategy:
    - The compiler tracks where the tape pointer will be at runtime and
      emits the shortest move to each cell it touches
    - Reads go through a three-cell copy so variables are never consumed
    - Functions are inlined at the call site; there is no call stack

    All state for one compilation lives in `self.state`, which is replaced
    on every call to `compile` and shared by nested blocks and inlined
    function bodies.
    """

    def __init__(self, free_subtraction_copies=False, trace=False):
        self.free_subtraction_copies = free_subtraction_copies
        self.trace = trace
        self.state = CompilerState(is_tracing=trace)

    # ===== Main Compilation Pipeline =====

    def compile(self, program):
        """
        Compile a sequence of statements.

        Args:
            program: statements produced by `bbf.parser.parse`

        Returns:
            Generated tape-machine code string
        """
        self.state = CompilerState(is_tracing=self.trace)
        self._compile_block(program)
        bf = ''.join(self.state.bf_code)
        logger.debug("Compiled %d statements into %d instructions using %d cells",
                     len(program), len(bf), self.state.max_ptr)
        return bf

    def _compile_block(self, body):
        for stmt in body:
            self._compile_statement(stmt)

    def _compile_statement(self, stmt):
        handler = self._statement_handlers().get(type(stmt))
        if handler is None:
            handler = self._unsafe_handlers().get(type(stmt))
        if handler is None:
            raise UnknownTokenError(f"Unhandled token type {type(stmt).__name__}", line=getattr(stmt, 'line', 0))

        logger.debug("%4d %s @ %d", stmt.line, type(stmt).__name__, self.state.current_ptr)
        self.state.add_trace(f"{stmt.line:4d} {type(stmt).__name__} @ {self.state.current_ptr}")
        try:
            handler(stmt)
        except BBFCompileError as err:
            if not err.line:
                err.line = stmt.line
            raise

    def _statement_handlers(self):
        return {
            Declaration: self._handle_declare,
            Assign: self._handle_assign,
            Show: self._handle_show,
            Input: self._handle_input,
            Remove: self._handle_remove,
            If: self._handle_if,
            Loop: self._handle_loop,
            Unsafe: self._handle_unsafe,
            FunctionDef: self._handle_function,
            Call: self._handle_call,
        }
