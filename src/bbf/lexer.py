from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import make_parse_error

SYMBOLS = '(){}+-*/:,.<>[]$'
TWO_CHAR_SYMBOLS = {'==', '!=', '<=', '>='}

# A '-' glued to the end of one of these tokens is the minus operator, not a sign.
_VALUE_END_KINDS = {'number', 'ident', 'char'}
_VALUE_END_SYMBOLS = {')', ']'}


@dataclass(frozen=True)
class Tok:
    kind: str  # 'number', 'ident', 'char', 'symbol' or 'eof'
    text: str
    line: int


def _is_minus_operator(source: str, i: int, tokens: List[Tok]) -> bool:
    if not tokens or i == 0 or source[i - 1].isspace():
        return False
    last = tokens[-1]
    return last.kind in _VALUE_END_KINDS or (last.kind == 'symbol' and last.text in _VALUE_END_SYMBOLS)


def tokenize(source: str) -> List[Tok]:
    tokens: List[Tok] = []
    i = 0
    line = 1
    n = len(source)

    while i < n:
        ch = source[i]

        if ch == '\n':
            line += 1
            i += 1
            continue
        if ch.isspace():
            i += 1
            continue

        if source.startswith('//', i):
            while i < n and source[i] != '\n':
                i += 1
            continue
        if source.startswith('/*', i):
            end = source.find('*/', i + 2)
            if end == -1:
                raise make_parse_error(message='Unterminated block comment', source=source, line=line)
            line += source.count('\n', i, end)
            i = end + 2
            continue

        if ch.isalpha() or ch == '_':
            j = i + 1
            while j < n and (source[j].isalnum() or source[j] == '_'):
                j += 1
            tokens.append(Tok('ident', source[i:j], line))
            i = j
            continue

        if ch.isdigit() or (ch == '-' and i + 1 < n and source[i + 1].isdigit() and not _is_minus_operator(source, i, tokens)):
            j = i + 1
            while j < n and source[j].isdigit():
                j += 1
            tokens.append(Tok('number', source[i:j], line))
            i = j
            continue

        if ch == "'":
            if i + 2 >= n or source[i + 2] != "'":
                raise make_parse_error(message='Malformed character literal', source=source, line=line)
            tokens.append(Tok('char', source[i + 1], line))
            i += 3
            continue

        if source[i:i + 2] in TWO_CHAR_SYMBOLS:
            tokens.append(Tok('symbol', source[i:i + 2], line))
            i += 2
            continue

        if ch in SYMBOLS:
            tokens.append(Tok('symbol', ch, line))
            i += 1
            continue

        raise make_parse_error(message=f"Unexpected character '{ch}'", source=source, line=line)

    tokens.append(Tok('eof', '', line))
    return tokens
