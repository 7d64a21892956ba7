from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .compiler import BBFCompiler
from .errors import BBFCompileError, make_compile_error
from .executor import ExecutorOptions, execute
from .parser import parse
from .tokens import Statement


@dataclass(frozen=True)
class CompileOptions:
    # Free the two drained copies a subtraction makes instead of leaking them.
    free_subtraction_copies: bool = False
    trace: bool = False


@dataclass(frozen=True)
class CompileResult:
    bf_code: str
    variables: Dict[str, Dict[str, Any]]
    max_ptr: int
    trace: List[str] = field(default_factory=list)


def _make_compiler(options: Optional[CompileOptions]) -> BBFCompiler:
    options = options or CompileOptions()
    return BBFCompiler(free_subtraction_copies=options.free_subtraction_copies, trace=options.trace)


def _result(compiler: BBFCompiler, bf: str) -> CompileResult:
    state = compiler.state
    variables = {
        name: {'pos': b.base, 'length': b.length, 'type': b.type.value}
        for name, b in state.variables.items()
    }
    return CompileResult(bf_code=bf, variables=variables, max_ptr=int(state.max_ptr), trace=list(state.trace))


def compile_program(program: Sequence[Statement], *, options: Optional[CompileOptions] = None) -> CompileResult:
    compiler = _make_compiler(options)
    bf = compiler.compile(list(program))
    return _result(compiler, bf)


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> CompileResult:
    program = parse(source)
    compiler = _make_compiler(options)
    try:
        bf = compiler.compile(program)
    except BBFCompileError as e:
        raise make_compile_error(e, source=source) from e
    return _result(compiler, bf)


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> CompileResult:
    p = Path(path)
    return compile_string(p.read_text(encoding=encoding), options=options)


def run_string(
    source: str,
    input_text: str = '',
    *,
    options: Optional[CompileOptions] = None,
    executor_options: Optional[ExecutorOptions] = None,
) -> str:
    result = compile_string(source, options=options)
    return execute(result.bf_code, input_text, executor_options)
