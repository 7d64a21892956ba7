from .compiler import BBFCompiler
from .lexer import tokenize
from .parser import parse
from .executor import ExecutorOptions, TapeMachine, execute
from .api import CompileOptions, CompileResult, compile_file, compile_program, compile_string, run_string

__all__ = [
    'BBFCompiler',
    'tokenize',
    'parse',
    'ExecutorOptions',
    'TapeMachine',
    'execute',
    'CompileOptions',
    'CompileResult',
    'compile_string',
    'compile_file',
    'compile_program',
    'run_string',
]
