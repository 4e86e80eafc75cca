from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Protocol, Union


Number = Union[int, float]


class SeatLayoutError(Exception):
    pass


class GridPlaced(Protocol):
    seat_number: int
    column: int
    row: int


def _check_cell_size(cell_size: Number) -> None:
    if not cell_size or cell_size <= 0:
        raise SeatLayoutError(f"cell_size must be positive, got {cell_size!r}")


def _snap(value: float) -> int:
    # half rounds up, matching how browsers round drag offsets
    return int(math.floor(value + 0.5))


def to_pixel(column: int, row: int, cell_size: Number) -> tuple[Number, Number]:
    _check_cell_size(cell_size)
    return (column - 1) * cell_size, (row - 1) * cell_size


def to_cell(x: float, y: float, cell_size: Number) -> tuple[int, int]:
    """
    Snap a pixel position to the nearest grid cell.

    Anything left of or above the first cell clamps to column/row 1.
    Non-finite coordinates have no cell and raise SeatLayoutError.
    """
    _check_cell_size(cell_size)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise SeatLayoutError(f"position must be finite, got ({x!r}, {y!r})")
    column = _snap(x / cell_size) + 1
    row = _snap(y / cell_size) + 1
    return max(1, column), max(1, row)


def collides(column: int, row: int, seat_number: int, seats: Iterable[GridPlaced]) -> bool:
    for s in seats:
        if s.seat_number == seat_number:
            continue
        if s.column == column and s.row == row:
            return True
    return False


@dataclass(frozen=True)
class GridGeometry:
    cell_size: Number

    def __post_init__(self) -> None:
        _check_cell_size(self.cell_size)

    def to_pixel(self, column: int, row: int) -> tuple[Number, Number]:
        return to_pixel(column, row, self.cell_size)

    def to_cell(self, x: float, y: float) -> tuple[int, int]:
        return to_cell(x, y, self.cell_size)

    def snap(self, x: float, y: float) -> tuple[Number, Number]:
        return self.to_pixel(*self.to_cell(x, y))
