from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class PrimitiveType(str, Enum):
    NUMBER = 'number'
    CHAR = 'char'


# ---------------- Values ----------------
@dataclass(frozen=True)
class Literal:
    value: int
    is_char: bool = False  # shown with character output


@dataclass(frozen=True)
class Variable:
    name: str
    index: Optional["Value"] = None  # None means element 0

    def constant_index(self) -> Optional[int]:
        """Index known at compile time, or None when it must be computed at runtime."""
        if self.index is None:
            return 0
        if isinstance(self.index, Literal):
            return self.index.value
        return None


@dataclass(frozen=True)
class Math:
    operator: str  # '+', '-', '*', '/'
    left: "Value"
    right: "Value"


@dataclass(frozen=True)
class Max:
    pass  # wraps to the executor's maximum cell value


Value = Union[Literal, Variable, Math, Max]


# ---------------- Statements ----------------
@dataclass(frozen=True)
class Node:
    line: int = field(default=0, compare=False, kw_only=True)


@dataclass(frozen=True)
class Declaration(Node):
    name: str
    type: PrimitiveType = PrimitiveType.NUMBER
    length: Optional[int] = None  # None for scalars


@dataclass(frozen=True)
class Assign(Node):
    target: Variable
    value: Value


@dataclass(frozen=True)
class Show(Node):
    value: Value


@dataclass(frozen=True)
class Input(Node):
    name: str


@dataclass(frozen=True)
class Remove(Node):
    name: str


@dataclass(frozen=True)
class If(Node):
    condition: Value
    body: Tuple["Statement", ...] = ()


@dataclass(frozen=True)
class Loop(Node):
    condition: Value
    body: Tuple["Statement", ...] = ()


@dataclass(frozen=True)
class Unsafe(Node):
    size: int
    body: Tuple["UnsafeStatement", ...] = ()


@dataclass(frozen=True)
class FunctionDef(Node):
    name: str
    body: Tuple["Statement", ...] = ()


@dataclass(frozen=True)
class Call(Node):
    name: str


# ---------------- Unsafe-only statements ----------------
@dataclass(frozen=True)
class UnsafeGoto(Node):
    offset: int


@dataclass(frozen=True)
class UnsafeAdd(Node):
    amount: Value


@dataclass(frozen=True)
class UnsafeReduce(Node):
    amount: Value


@dataclass(frozen=True)
class UnsafeShow(Node):
    pass


@dataclass(frozen=True)
class UnsafeLoop(Node):
    body: Tuple["UnsafeStatement", ...] = ()


@dataclass(frozen=True)
class Abstract(Node):
    bf: str  # emitted verbatim


Statement = Union[Declaration, Assign, Show, Input, Remove, If, Loop, Unsafe, FunctionDef, Call]
UnsafeStatement = Union[UnsafeGoto, UnsafeAdd, UnsafeReduce, UnsafeShow, UnsafeLoop, Abstract]

INSTRUCTIONS = '><+-.,[]'
