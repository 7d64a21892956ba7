from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from .tokens import PrimitiveType


class CellStatus(Enum):
    FREE = 'free'
    TEMP = 'temp'
    RESERVED = 'reserved'  # inside an active unsafe region


@dataclass(frozen=True)
class NamedCell:
    name: str
    index: int
    type: PrimitiveType


Occupancy = Union[CellStatus, NamedCell]


class TapeAllocator:
    """
    Compile-time occupancy map of the tape.

    Every address the compiler has handed out is recorded with its status;
    addresses never handed out count as free. Named cells carry the variable
    name, element index and declared type they are bound to.

    Scalars and temporaries come from `allocate_one`, which prefers the lowest
    freed address. Arrays and unsafe regions come from `allocate_region`, which
    is the only way to obtain a contiguous run of cells.
    """

    def __init__(self):
        self.cells: Dict[int, Occupancy] = {}

    def status(self, pos: int) -> Occupancy:
        return self.cells.get(pos, CellStatus.FREE)

    def is_free(self, pos: int) -> bool:
        return self.status(pos) is CellStatus.FREE

    def is_temp(self, pos: int) -> bool:
        return self.status(pos) is CellStatus.TEMP

    @property
    def high_water(self) -> int:
        """One past the highest address ever touched."""
        if not self.cells:
            return 0
        return max(self.cells) + 1

    def allocate_one(self) -> int:
        # Does not mark the cell; the caller sets its status right away.
        for pos in sorted(self.cells):
            if self.cells[pos] is CellStatus.FREE:
                return pos
        return self.high_water

    def allocate_region(self, size: int) -> int:
        start = 0
        while True:
            for offset in range(size):
                if not self.is_free(start + offset):
                    start = start + offset + 1
                    break
            else:
                return start

    def mark_temp(self, pos: int) -> None:
        self.cells[pos] = CellStatus.TEMP

    def reserve(self, pos: int) -> None:
        self.cells[pos] = CellStatus.RESERVED

    def bind(self, pos: int, name: str, index: int, type: PrimitiveType) -> None:
        self.cells[pos] = NamedCell(name, index, type)

    def free(self, pos: int) -> None:
        self.cells[pos] = CellStatus.FREE

    def count(self, status: CellStatus) -> int:
        return sum(1 for occupant in self.cells.values() if occupant is status)
