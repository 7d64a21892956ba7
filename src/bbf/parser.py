from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import BBFParseError, make_parse_error
from .lexer import Tok, tokenize
from .tokens import (
    INSTRUCTIONS,
    Abstract,
    Assign,
    Call,
    Declaration,
    FunctionDef,
    If,
    Input,
    Literal,
    Loop,
    Math,
    Max,
    PrimitiveType,
    Remove,
    Show,
    Statement,
    Unsafe,
    UnsafeAdd,
    UnsafeGoto,
    UnsafeLoop,
    UnsafeReduce,
    UnsafeShow,
    UnsafeStatement,
    Value,
    Variable,
)


class Parser:
    """
    Recursive-descent parser for BBF source.

        program    := statement*
        statement  := function | define | set | show | input | remove
                    | if | loop | unsafe | '$' IDENT
        expression := term (('+'|'-') term)*
        term       := factor (('*'|'/') factor)*
        factor     := NUMBER | CHAR | 'true' | 'false' | 'max'
                    | IDENT ['[' expression ']'] | '(' ['math'] expression ')'
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.pos = 0

    # ===== Token helpers =====

    def _peek(self) -> Tok:
        return self.tokens[self.pos]

    def _advance(self) -> Tok:
        tok = self.tokens[self.pos]
        if tok.kind != 'eof':
            self.pos += 1
        return tok

    def _error(self, message: str, tok: Optional[Tok] = None) -> BBFParseError:
        line = (tok or self._peek()).line
        return make_parse_error(message=message, source=self.source, line=line)

    def _describe(self, tok: Tok) -> str:
        if tok.kind == 'eof':
            return 'end of input'
        return f"{tok.kind} '{tok.text}'"

    def _is_symbol(self, text: str) -> bool:
        tok = self._peek()
        return tok.kind == 'symbol' and tok.text == text

    def _is_ident(self, text: str) -> bool:
        tok = self._peek()
        return tok.kind == 'ident' and tok.text == text

    def _expect_symbol(self, text: str) -> Tok:
        if not self._is_symbol(text):
            raise self._error(f"Expected symbol '{text}', found {self._describe(self._peek())}")
        return self._advance()

    def _expect_identifier(self) -> str:
        tok = self._peek()
        if tok.kind != 'ident':
            raise self._error(f"Expected identifier, found {self._describe(tok)}")
        return self._advance().text

    def _expect_number(self, what: str) -> int:
        tok = self._peek()
        if tok.kind != 'number':
            raise self._error(f"Expected number after {what}, found {self._describe(tok)}")
        return int(self._advance().text)

    # ===== Program =====

    def parse_program(self) -> List[Statement]:
        statements: List[Statement] = []
        while self._peek().kind != 'eof':
            statements.append(self.parse_statement())
        return statements

    def _parse_block(self, unsafe: bool = False) -> Tuple:
        self._expect_symbol('{')
        body = []
        while not self._is_symbol('}'):
            if self._peek().kind == 'eof':
                raise self._error("Block not terminated with '}'")
            body.append(self.parse_unsafe_statement() if unsafe else self.parse_statement())
        self._advance()
        return tuple(body)

    def parse_statement(self) -> Statement:
        tok = self._peek()
        line = tok.line

        if tok.kind == 'symbol' and tok.text == '$':
            self._advance()
            return Call(self._expect_identifier(), line=line)

        if tok.kind != 'ident':
            raise self._error(f"Expected keyword or function call, found {self._describe(tok)}")
        keyword = self._advance().text

        if keyword == 'function':
            name = self._expect_identifier()
            return FunctionDef(name, self._parse_block(), line=line)

        if keyword == 'define':
            name = self._expect_identifier()
            length = None
            if self._peek().kind == 'number':
                length = int(self._advance().text)
            var_type = PrimitiveType.NUMBER
            if self._is_ident('char') or self._is_ident('number'):
                var_type = PrimitiveType(self._advance().text)
            return Declaration(name, var_type, length, line=line)

        if keyword == 'set':
            name = self._expect_identifier()
            index = None
            if self._is_symbol('['):
                self._advance()
                index = self.parse_expression()
                self._expect_symbol(']')
            return Assign(Variable(name, index), self.parse_expression(), line=line)

        if keyword == 'show':
            return Show(self.parse_expression(), line=line)

        if keyword == 'input':
            return Input(self._expect_identifier(), line=line)

        if keyword == 'remove':
            return Remove(self._expect_identifier(), line=line)

        if keyword == 'if':
            condition = self.parse_expression()
            return If(condition, self._parse_block(), line=line)

        if keyword == 'loop':
            condition = self.parse_expression()
            return Loop(condition, self._parse_block(), line=line)

        if keyword == 'unsafe':
            if self._peek().kind != 'number':
                raise self._error('Unsafe block must specify size')
            size = int(self._advance().text)
            return Unsafe(size, self._parse_block(unsafe=True), line=line)

        raise self._error(f"Unknown statement keyword '{keyword}'", tok)

    def parse_unsafe_statement(self) -> UnsafeStatement:
        tok = self._peek()
        line = tok.line
        if tok.kind != 'ident':
            raise self._error(f"Expected unsafe operation, found {self._describe(tok)}")
        op = self._advance().text

        if op == 'goto':
            return UnsafeGoto(self._expect_number('goto'), line=line)
        if op == 'add':
            return UnsafeAdd(self.parse_expression(), line=line)
        if op == 'reduce':
            return UnsafeReduce(self.parse_expression(), line=line)
        if op == 'show':
            return UnsafeShow(line=line)
        if op == 'loop':
            return UnsafeLoop(self._parse_block(unsafe=True), line=line)
        if op == 'abstract':
            ops: List[str] = []
            while not self._is_ident('end'):
                nxt = self._peek()
                if nxt.kind == 'symbol' and nxt.text in INSTRUCTIONS:
                    ops.append(self._advance().text)
                    continue
                raise self._error(f"Invalid character inside abstract block: {self._describe(nxt)}")
            self._advance()
            return Abstract(''.join(ops), line=line)

        raise self._error(f"Unknown unsafe command '{op}'", tok)

    # ===== Expressions =====

    def parse_expression(self) -> Value:
        left = self._parse_term()
        while self._is_symbol('+') or self._is_symbol('-'):
            op = self._advance().text
            left = Math(op, left, self._parse_term())
        return left

    def _parse_term(self) -> Value:
        left = self._parse_factor()
        while self._is_symbol('*') or self._is_symbol('/'):
            op = self._advance().text
            left = Math(op, left, self._parse_factor())
        return left

    def _parse_factor(self) -> Value:
        tok = self._peek()

        if tok.kind == 'number':
            self._advance()
            return Literal(int(tok.text))

        if tok.kind == 'char':
            self._advance()
            return Literal(ord(tok.text), is_char=True)

        if tok.kind == 'ident':
            self._advance()
            if tok.text == 'max':
                return Max()
            if tok.text == 'true':
                return Literal(1)
            if tok.text == 'false':
                return Literal(0)
            if self._is_symbol('['):
                self._advance()
                index = self.parse_expression()
                self._expect_symbol(']')
                return Variable(tok.text, index)
            return Variable(tok.text)

        if tok.kind == 'symbol' and tok.text == '(':
            self._advance()
            if self._is_ident('math'):
                self._advance()
            expression = self.parse_expression()
            if not self._is_symbol(')'):
                raise self._error(f"Expected ')' after expression, found {self._describe(self._peek())}")
            self._advance()
            return expression

        raise self._error(f"Unexpected token in factor: {self._describe(tok)}")


def parse(source: str) -> List[Statement]:
    return Parser(source).parse_program()
