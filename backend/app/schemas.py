from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LayoutCreate(BaseModel):
    # Counts may be zero/negative while the form is incomplete; that yields no seats.
    name: str = ""
    seat_count: int = 0
    columns: int = 0
    rows: int = 0
    port: int = Field(ge=0, default=0)
    cell_size: Optional[int] = Field(default=None, gt=0)


class SeatOut(BaseModel):
    seat_number: int
    column: int
    row: int
    pixel_x: float
    pixel_y: float
    identifier: str = ""


class LayoutOut(BaseModel):
    id: int
    name: str
    port: int
    cell_size: float
    requested: int
    truncated: bool
    seats: list[SeatOut]


class SeatMove(BaseModel):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class SeatMoveResult(BaseModel):
    accepted: bool
    seat: SeatOut
    reason: Optional[str] = None
    blocking_seat: Optional[int] = None


class IdentifierUpdate(BaseModel):
    identifier: str = ""
    validate_ip: bool = False


class SubmissionItem(BaseModel):
    name: str
    seat_number: int
    column: int
    row: int
    identifier: str


class PositionIn(BaseModel):
    seat_number: int
    column: int = Field(ge=1)
    row: int = Field(ge=1)


class StatusRenderRequest(BaseModel):
    positions: list[PositionIn] = Field(default_factory=list)
    # None means the status feed has not arrived or failed
    statuses: Optional[dict[int, bool]] = None
    cell_size: Optional[int] = Field(default=None, gt=0)


class UsageRenderRequest(BaseModel):
    positions: list[PositionIn] = Field(default_factory=list)
    usage: Optional[dict[int, float]] = None
    cell_size: Optional[int] = Field(default=None, gt=0)


class RenderSeatOut(BaseModel):
    seat_number: int
    pixel_x: float
    pixel_y: float
    status: Optional[str] = None
    usage_intensity: Optional[float] = None
    used_percent: Optional[float] = None
    opacity: Optional[float] = None
    color: Optional[str] = None


class OccupancySummaryOut(BaseModel):
    total: int
    occupied: int
    available: int
    utilization: float
    band: str


class RenderOut(BaseModel):
    width: float
    height: float
    seats: list[RenderSeatOut]
    summary: Optional[OccupancySummaryOut] = None


class UtilizationIn(BaseModel):
    venue_id: int
    utilization: float
    recorded_at: datetime
    name: Optional[str] = None


class UtilizationSummaryRequest(BaseModel):
    records: list[UtilizationIn] = Field(default_factory=list)

    @field_validator("records")
    @classmethod
    def _single_venue(cls, v: list[UtilizationIn]) -> list[UtilizationIn]:
        if len({r.venue_id for r in v}) > 1:
            raise ValueError("records must belong to a single venue")
        return v


class ChartPointOut(BaseModel):
    recorded_at: datetime
    time: str
    date: str
    utilization: float


class UtilizationSummaryOut(BaseModel):
    name: Optional[str] = None
    current: Optional[float] = None
    change: float
    points: list[ChartPointOut]
