from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from shapely.geometry import MultiPoint, Point, box

from .grid import GridGeometry, Number


OCCUPIED = "occupied"
AVAILABLE = "available"

# indigo used by the heat map; alpha carries the usage
HEAT_RGB = (79, 70, 229)
MIN_OPACITY = 0.1

V = TypeVar("V")


@dataclass(frozen=True)
class SeatPosition:
    seat_number: int
    column: int
    row: int


@dataclass(frozen=True)
class RenderSeat:
    seat_number: int
    pixel_x: Number
    pixel_y: Number
    status: Optional[str] = None
    usage_intensity: Optional[float] = None
    used_percent: Optional[float] = None

    @property
    def occupied(self) -> bool:
        return self.status == OCCUPIED


@dataclass(frozen=True)
class CanvasBounds:
    width: Number = 0
    height: Number = 0


@dataclass(frozen=True)
class RenderFrame:
    seats: tuple[RenderSeat, ...] = ()
    bounds: CanvasBounds = CanvasBounds()
    # set when the last fetch failed; seats may still hold an older frame
    unavailable: bool = False

    @property
    def empty(self) -> bool:
        return not self.seats


def join_by_seat(
    positions: Iterable[SeatPosition],
    feed: Optional[Mapping[int, V]],
    default: V,
) -> list[tuple[SeatPosition, V]]:
    """
    Pair every position with its feed value, keyed by seat number.

    Order follows ``positions``. Seats missing from the feed, or a feed that
    has not arrived (None), get ``default``.
    """
    feed = feed or {}
    return [(p, feed.get(p.seat_number, default)) for p in positions]


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _as_percent(value) -> float:
    try:
        percent = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(percent) else percent


def merge_positions_with_status(
    positions: Iterable[SeatPosition],
    statuses: Optional[Mapping[int, bool]],
    cell_size: Number,
) -> list[RenderSeat]:
    geometry = GridGeometry(cell_size)
    out: list[RenderSeat] = []
    for p, occupied in join_by_seat(positions, statuses, False):
        x, y = geometry.to_pixel(p.column, p.row)
        out.append(RenderSeat(p.seat_number, x, y, status=OCCUPIED if occupied else AVAILABLE))
    return out


def merge_positions_with_usage(
    positions: Iterable[SeatPosition],
    usage: Optional[Mapping[int, float]],
    cell_size: Number,
) -> list[RenderSeat]:
    geometry = GridGeometry(cell_size)
    out: list[RenderSeat] = []
    for p, raw in join_by_seat(positions, usage, 0.0):
        percent = _as_percent(raw)
        x, y = geometry.to_pixel(p.column, p.row)
        out.append(
            RenderSeat(
                p.seat_number,
                x,
                y,
                usage_intensity=_clamp(percent / 100.0, 0.0, 1.0),
                used_percent=percent,
            )
        )
    return out


def usage_to_opacity(percent: float, minimum: float = MIN_OPACITY) -> float:
    # never fully transparent: an invisible seat reads as "no seat"
    return _clamp(_as_percent(percent) / 100.0, minimum, 1.0)


def usage_to_color(percent: float, minimum: float = MIN_OPACITY) -> str:
    r, g, b = HEAT_RGB
    return f"rgba({r}, {g}, {b}, {usage_to_opacity(percent, minimum):g})"


def canvas_bounds(seats: Sequence[RenderSeat], cell_size: Number) -> CanvasBounds:
    if not seats:
        return CanvasBounds()
    _, _, max_x, max_y = MultiPoint([(s.pixel_x, s.pixel_y) for s in seats]).bounds
    return CanvasBounds(width=max_x + cell_size, height=max_y + cell_size)


def build_frame(seats: Sequence[RenderSeat], cell_size: Number, *, unavailable: bool = False) -> RenderFrame:
    return RenderFrame(seats=tuple(seats), bounds=canvas_bounds(seats, cell_size), unavailable=unavailable)


def seat_at(
    seats: Iterable[RenderSeat],
    x: float,
    y: float,
    cell_size: Number,
    scale: float = 1.0,
) -> Optional[int]:
    """Seat number under a tap at (x, y) on a view zoomed by ``scale``, or None."""
    if scale <= 0:
        return None
    tap = Point(x / scale, y / scale)
    for s in seats:
        if box(s.pixel_x, s.pixel_y, s.pixel_x + cell_size, s.pixel_y + cell_size).covers(tap):
            return s.seat_number
    return None


# lower bounds of the discrete utilization bands, highest first
UTILIZATION_BANDS = (
    (80.0, "busy"),
    (60.0, "high"),
    (40.0, "moderate"),
)
LOW = "low"
IDLE = "idle"


@dataclass(frozen=True)
class OccupancySummary:
    total: int = 0
    occupied: int = 0
    available: int = 0
    utilization: float = 0.0

    @property
    def band(self) -> str:
        return utilization_band(self.utilization)


def occupancy_summary(seats: Iterable[RenderSeat]) -> OccupancySummary:
    seats = list(seats)
    total = len(seats)
    occupied = sum(1 for s in seats if s.occupied)
    utilization = occupied * 100.0 / total if total else 0.0
    return OccupancySummary(total=total, occupied=occupied, available=total - occupied, utilization=utilization)


def utilization_band(percent: float) -> str:
    """Discrete band for a utilization percentage: busy, high, moderate, low or idle."""
    percent = _as_percent(percent)
    for lower, band in UTILIZATION_BANDS:
        if percent >= lower:
            return band
    return LOW if percent > 0 else IDLE
