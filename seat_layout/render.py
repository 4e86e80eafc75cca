from __future__ import annotations

from typing import Iterable, Optional

from .editor import SeatDefinition
from .grid import Number, to_cell
from .occupancy import RenderSeat


def _cell(text: Optional[str], width: int) -> str:
    if not text:
        return ".".center(width)
    t = str(text)
    if len(t) > width:
        t = t[: max(0, width - 1)] + "…"
    return t.center(width)


def _grid(cells: dict[tuple[int, int], str], cell_width: int) -> str:
    if not cells:
        return "(no seats)"
    cols = max(c for c, _ in cells)
    rows = max(r for _, r in cells)
    header = " " * (cell_width + 2) + " ".join(f"C{c}".center(cell_width) for c in range(1, cols + 1))
    lines = [header]
    for r in range(1, rows + 1):
        row_cells = " ".join(_cell(cells.get((c, r)), cell_width) for c in range(1, cols + 1))
        lines.append(f"R{r}".ljust(cell_width + 2) + row_cells)
    return "\n".join(lines)


def render_layout(seats: Iterable[SeatDefinition], *, cell_width: int = 6) -> str:
    """Seat numbers on their grid cells; a trailing ``@`` marks an assigned identifier."""
    cell_width = max(3, int(cell_width))
    cells = {(s.column, s.row): f"{s.seat_number}{'@' if s.identifier else ''}" for s in seats}
    return _grid(cells, cell_width)


def render_occupancy(seats: Iterable[RenderSeat], cell_size: Number, *, cell_width: int = 6) -> str:
    """Occupied seats get a ``*``; usage seats show their rounded percentage."""
    cell_width = max(3, int(cell_width))
    cells: dict[tuple[int, int], str] = {}
    for s in seats:
        if s.used_percent is not None:
            label = f"{s.seat_number}:{s.used_percent:.0f}"
        else:
            label = f"{s.seat_number}{'*' if s.occupied else ''}"
        cells[to_cell(s.pixel_x, s.pixel_y, cell_size)] = label
    return _grid(cells, cell_width)
