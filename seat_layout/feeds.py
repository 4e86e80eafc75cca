"""
Loading seat positions and their status/usage feed for a live map.

Both feeds are fetched concurrently. Every refresh bumps a generation
counter and responses from an older generation are dropped when they
land, so a slow answer for a previous date range never replaces a newer
one. A frame is rebuilt whenever a current response arrives: positions
without their feed render with default values, a failed feed keeps the
positions on screen and marks the frame unavailable.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from loguru import logger

from .config import load_settings
from .grid import Number
from .occupancy import (
    RenderFrame,
    RenderSeat,
    SeatPosition,
    build_frame,
    merge_positions_with_status,
    merge_positions_with_usage,
)


PositionsFetcher = Callable[[], Awaitable[Iterable[SeatPosition]]]
MergeFn = Callable[[Iterable[SeatPosition], Optional[Mapping[int, Any]], Number], list[RenderSeat]]


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def today(cls) -> "DateRange":
        d = date.today()
        return cls(d, d)


@dataclass
class _Pending:
    generation: int
    positions: Optional[list[SeatPosition]] = None
    feed: Optional[Mapping[int, Any]] = None
    feed_failed: bool = False
    errors: list[str] = field(default_factory=list)


class SeatFeedView:
    """Holds the latest render frame of one live seat map."""

    def __init__(
        self,
        merge: MergeFn,
        cell_size: Optional[Number] = None,
        on_frame: Optional[Callable[[RenderFrame], None]] = None,
    ):
        if cell_size is None:
            cell_size = load_settings().viewer_cell_size
        self.merge = merge
        self.cell_size = cell_size
        self.on_frame = on_frame
        self.frame = RenderFrame()
        self.generation = 0
        self.loading = False
        self._pending: Optional[_Pending] = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def _publish(self, frame: RenderFrame) -> None:
        self.frame = frame
        if self.on_frame is not None:
            self.on_frame(frame)

    def _rebuild(self, pending: _Pending) -> None:
        if pending.positions is None:
            return
        seats = self.merge(pending.positions, pending.feed, self.cell_size)
        self._publish(build_frame(seats, self.cell_size, unavailable=pending.feed_failed))

    async def _load_positions(self, pending: _Pending, fetch: PositionsFetcher) -> None:
        try:
            positions = list(await fetch())
        except Exception as e:  # noqa: BLE001 - transport errors become a "no data" frame
            if not self.is_current(pending.generation):
                return
            logger.warning("seat positions unavailable: {}", e)
            pending.errors.append(str(e))
            self._publish(RenderFrame(unavailable=True))
            return
        if not self.is_current(pending.generation):
            logger.debug("dropping stale positions from generation {}", pending.generation)
            return
        pending.positions = positions
        self._rebuild(pending)

    async def _load_feed(self, pending: _Pending, fetch: Callable[[], Awaitable[Mapping[int, Any]]]) -> None:
        try:
            feed = dict(await fetch())
        except Exception as e:  # noqa: BLE001 - seats still render with default values
            if not self.is_current(pending.generation):
                return
            logger.warning("seat feed unavailable, using defaults: {}", e)
            pending.errors.append(str(e))
            pending.feed_failed = True
            self._rebuild(pending)
            return
        if not self.is_current(pending.generation):
            logger.debug("dropping stale seat feed from generation {}", pending.generation)
            return
        pending.feed = feed
        self._rebuild(pending)

    async def refresh(
        self,
        fetch_positions: PositionsFetcher,
        fetch_feed: Callable[[], Awaitable[Mapping[int, Any]]],
    ) -> RenderFrame:
        self.generation += 1
        pending = _Pending(self.generation)
        self._pending = pending
        self.loading = True
        try:
            await asyncio.gather(
                self._load_positions(pending, fetch_positions),
                self._load_feed(pending, fetch_feed),
            )
        finally:
            if self.is_current(pending.generation):
                self.loading = False
        return self.frame

    @property
    def errors(self) -> list[str]:
        return list(self._pending.errors) if self._pending else []


class StatusMapView(SeatFeedView):
    """Live occupied/available map."""

    def __init__(self, cell_size: Optional[Number] = None, on_frame=None):
        super().__init__(merge_positions_with_status, cell_size=cell_size, on_frame=on_frame)


class UsageMapView(SeatFeedView):
    """Usage heat map over a date range; changing the range starts a new generation."""

    def __init__(
        self,
        cell_size: Optional[Number] = None,
        on_frame=None,
        date_range: Optional[DateRange] = None,
    ):
        super().__init__(merge_positions_with_usage, cell_size=cell_size, on_frame=on_frame)
        self.date_range = date_range or DateRange.today()

    async def load(
        self,
        fetch_positions: PositionsFetcher,
        fetch_usage: Callable[[DateRange], Awaitable[Mapping[int, float]]],
        date_range: Optional[DateRange] = None,
    ) -> RenderFrame:
        if date_range is not None:
            self.date_range = date_range
        requested = self.date_range
        return await self.refresh(fetch_positions, lambda: fetch_usage(requested))
