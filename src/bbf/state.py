from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .allocator import TapeAllocator
from .registry import FunctionRegistry
from .tokens import PrimitiveType


@dataclass
class Binding:
    base: int
    length: int
    type: PrimitiveType


@dataclass
class CompilerState:
    allocator: TapeAllocator = field(default_factory=TapeAllocator)
    variables: Dict[str, Binding] = field(default_factory=dict)
    functions: FunctionRegistry = field(default_factory=FunctionRegistry)
    current_ptr: int = 0
    bf_code: List[str] = field(default_factory=list)

    # Set only while an unsafe block is being compiled.
    unsafe_ptr: Optional[int] = None
    unsafe_region: Optional[Tuple[int, int]] = None  # (start, size)

    trace: List[str] = field(default_factory=list)
    is_tracing: bool = False

    @property
    def max_ptr(self) -> int:
        return self.allocator.high_water

    def add_trace(self, message: str) -> None:
        if self.is_tracing:
            self.trace.append(message)
