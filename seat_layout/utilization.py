from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional


@dataclass(frozen=True)
class UtilizationRecord:
    venue_id: int
    utilization: float
    recorded_at: datetime
    name: Optional[str] = None


@dataclass(frozen=True)
class ChartPoint:
    recorded_at: datetime
    time_label: str
    date_label: str
    utilization: float


@dataclass(frozen=True)
class UtilizationSummary:
    points: tuple[ChartPoint, ...]
    current: Optional[float]
    change: float
    name: Optional[str] = None


def _sort_key(record: UtilizationRecord) -> datetime:
    # naive timestamps are taken as UTC so they order against aware ones
    ts = record.recorded_at
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts.astimezone(timezone.utc)


def summarize_history(records: Iterable[UtilizationRecord]) -> UtilizationSummary:
    """
    Order a competitor's utilization samples in time for charting.

    ``current`` is the latest sample and ``change`` its difference from the
    one before it (0.0 with fewer than two samples).
    """
    ordered = sorted(records, key=_sort_key)
    points = tuple(
        ChartPoint(
            recorded_at=r.recorded_at,
            time_label=r.recorded_at.strftime("%H:%M"),
            date_label=r.recorded_at.date().isoformat(),
            utilization=float(r.utilization),
        )
        for r in ordered
    )
    if not ordered:
        return UtilizationSummary(points=(), current=None, change=0.0)

    last = ordered[-1]
    change = 0.0
    if len(ordered) >= 2:
        change = round(float(last.utilization) - float(ordered[-2].utilization), 2)
    return UtilizationSummary(points=points, current=float(last.utilization), change=change, name=last.name)
