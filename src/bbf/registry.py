from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from .errors import RecursiveCallError, UnknownFunctionError
from .tokens import Abstract, Statement, Unsafe

# Debug dump of the tape, understood by the bundled executor only.
DUMP_INSTRUCTION = '&'

BUILTINS: Dict[str, Tuple[Statement, ...]] = {
    '__dump': (Unsafe(size=1, body=(Abstract(DUMP_INSTRUCTION),)),),
}


class FunctionRegistry:
    """Function name -> body. Entries are never removed once defined."""

    def __init__(self):
        self.functions: Dict[str, Tuple[Statement, ...]] = dict(BUILTINS)
        self.expanding: List[str] = []

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def define(self, name: str, body: Tuple[Statement, ...]) -> None:
        self.functions[name] = tuple(body)

    def resolve(self, name: str) -> Tuple[Statement, ...]:
        body = self.functions.get(name)
        if body is None:
            raise UnknownFunctionError(f"Function {name} not defined")
        return body

    @contextmanager
    def expansion(self, name: str) -> Iterator[Tuple[Statement, ...]]:
        """Resolve `name` and hold it on the expansion stack while its body is inlined."""
        body = self.resolve(name)
        if name in self.expanding:
            chain = ' -> '.join(self.expanding + [name])
            raise RecursiveCallError(f"Recursive call cannot be inlined: {chain}")
        self.expanding.append(name)
        try:
            yield body
        finally:
            self.expanding.pop()
