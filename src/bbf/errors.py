from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    if not lines:
        return ''
    idx = min(max(1, line_no_1), len(lines))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _hint_for(message: str, *, kind: str) -> Optional[str]:
    msg = message.lower()
    if kind == 'parse':
        if 'not terminated' in msg:
            return 'Check for a missing closing "}".'
        if 'unexpected character' in msg:
            return 'Only identifiers, numbers, character literals and ( ) { } [ ] + - * / $ are allowed.'
        if 'unsafe block must specify size' in msg:
            return 'Example: unsafe 4 { goto 1 add 3 show }'
        return None
    if kind == 'compile':
        if 'did you mean' in msg:
            return None
        if 'not declared' in msg:
            return 'Declare the variable first: define <name> [length] [char|number].'
        if 'not defined' in msg:
            return 'Define the function before the call is reached: function <name> { ... }.'
        if 'recursive' in msg:
            return 'Functions are inlined at the call site; recursion cannot be expanded.'
        if 'unsafe' in msg:
            return 'Unsafe operations are only valid inside unsafe <size> { ... }.'
        if 'unsupported operator' in msg:
            return 'Only + and - are compiled; rewrite * and / as loops.'
        return None
    return None


@dataclass(eq=False)
class BBFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class BBFParseError(BBFError):
    line: int = 0
    context: str = ''


@dataclass(eq=False)
class BBFCompileError(BBFError):
    line: int = 0
    context: str = ''


class DeclarationError(BBFCompileError):
    pass


class UnsupportedOperatorError(BBFCompileError):
    pass


class MalformedConditionError(BBFCompileError):
    pass


class UnsafeContextError(BBFCompileError):
    pass


class UnknownFunctionError(BBFCompileError):
    pass


class RecursiveCallError(BBFCompileError):
    pass


class UnknownTokenError(BBFCompileError):
    pass


@dataclass(eq=False)
class BBFExecutionError(BBFError):
    pass


def make_parse_error(*, message: str, source: str, line: int) -> BBFParseError:
    lines = source.split('\n')
    ctx = _build_context(lines, line)
    hint = _hint_for(message, kind='parse')
    hint_block = f"\nHint: {hint}" if hint else ""
    return BBFParseError(
        message=f"ParseError: {message} (line {line})\n{ctx}{hint_block}",
        line=line,
        context=ctx,
    )


def make_compile_error(err: BBFCompileError, *, source: str) -> BBFCompileError:
    """Rebuild `err` as the same error class with a source excerpt attached."""
    lines = source.split('\n')
    ctx = _build_context(lines, err.line)
    hint = _hint_for(err.message, kind='compile')
    hint_block = f"\nHint: {hint}" if hint else ""
    return type(err)(
        message=f"CompileError: {err.message} (line {err.line})\n{ctx}{hint_block}",
        line=err.line,
        context=ctx,
    )
