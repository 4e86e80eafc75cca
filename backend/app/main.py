from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from seat_layout.config import load_settings
from seat_layout.editor import DragRejected, LayoutForm, SeatDefinition, ip_identifier
from seat_layout.grid import SeatLayoutError
from seat_layout.log import configure_logging
from seat_layout.occupancy import (
    RenderSeat,
    SeatPosition,
    canvas_bounds,
    merge_positions_with_status,
    merge_positions_with_usage,
    occupancy_summary,
    usage_to_color,
    usage_to_opacity,
)
from seat_layout.render import render_layout
from seat_layout.utilization import UtilizationRecord, summarize_history

from .schemas import (
    ChartPointOut,
    IdentifierUpdate,
    LayoutCreate,
    LayoutOut,
    OccupancySummaryOut,
    PositionIn,
    RenderOut,
    RenderSeatOut,
    SeatMove,
    SeatMoveResult,
    SeatOut,
    StatusRenderRequest,
    SubmissionItem,
    UsageRenderRequest,
    UtilizationSummaryOut,
    UtilizationSummaryRequest,
)
from .store import LayoutSession, LayoutStore, get_store


app = FastAPI(title="Seat Layout API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()


def _layout(layout_id: int, store: LayoutStore) -> LayoutSession:
    session = store.get(layout_id)
    if not session:
        raise HTTPException(status_code=404, detail="layout not found")
    return session


def _seat_out(seat: SeatDefinition) -> SeatOut:
    return SeatOut(
        seat_number=seat.seat_number,
        column=seat.column,
        row=seat.row,
        pixel_x=seat.pixel_x,
        pixel_y=seat.pixel_y,
        identifier=seat.identifier,
    )


def _layout_out(session: LayoutSession) -> LayoutOut:
    return LayoutOut(
        id=session.id,
        name=session.form.name,
        port=session.form.port,
        cell_size=session.editor.cell_size,
        requested=session.form.seat_count,
        truncated=session.truncated,
        seats=[_seat_out(s) for s in session.editor.seats],
    )


def _positions(items: list[PositionIn]) -> list[SeatPosition]:
    return [SeatPosition(seat_number=p.seat_number, column=p.column, row=p.row) for p in items]


def _render_out(seats: list[RenderSeat], cell_size: int, *, heat: bool = False) -> RenderOut:
    bounds = canvas_bounds(seats, cell_size)
    min_opacity = load_settings().min_opacity
    out = []
    for s in seats:
        item = RenderSeatOut(
            seat_number=s.seat_number,
            pixel_x=s.pixel_x,
            pixel_y=s.pixel_y,
            status=s.status,
            usage_intensity=s.usage_intensity,
            used_percent=s.used_percent,
        )
        if heat:
            item.opacity = usage_to_opacity(s.used_percent or 0.0, min_opacity)
            item.color = usage_to_color(s.used_percent or 0.0, min_opacity)
        out.append(item)
    return RenderOut(width=bounds.width, height=bounds.height, seats=out)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/layouts", response_model=LayoutOut)
def create_layout(payload: LayoutCreate, store: LayoutStore = Depends(get_store)) -> LayoutOut:
    form = LayoutForm(
        name=payload.name,
        seat_count=payload.seat_count,
        columns=payload.columns,
        rows=payload.rows,
        port=payload.port,
    )
    try:
        session = store.create(form, cell_size=payload.cell_size)
    except SeatLayoutError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _layout_out(session)


@app.get("/layouts/{layout_id}", response_model=LayoutOut)
def get_layout(layout_id: int, store: LayoutStore = Depends(get_store)) -> LayoutOut:
    session = _layout(layout_id, store)
    with session.lock:
        return _layout_out(session)


@app.delete("/layouts/{layout_id}")
def delete_layout(layout_id: int, store: LayoutStore = Depends(get_store)) -> dict:
    if not store.delete(layout_id):
        raise HTTPException(status_code=404, detail="layout not found")
    return {"deleted": True}


@app.post("/layouts/{layout_id}/reset", response_model=LayoutOut)
def reset_layout(layout_id: int, store: LayoutStore = Depends(get_store)) -> LayoutOut:
    session = _layout(layout_id, store)
    with session.lock:
        session.editor.reset()
        session.form = LayoutForm(name=session.form.name, port=session.form.port)
        return _layout_out(session)


@app.put("/layouts/{layout_id}/seats/{seat_number}/position", response_model=SeatMoveResult)
def move_seat(layout_id: int, seat_number: int, payload: SeatMove, store: LayoutStore = Depends(get_store)) -> SeatMoveResult:
    session = _layout(layout_id, store)
    editor = session.editor
    with session.lock:
        try:
            started = editor.begin_drag(seat_number)
            result = started if isinstance(started, DragRejected) else editor.end_drag(seat_number, payload.x, payload.y)
        except SeatLayoutError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        if isinstance(result, DragRejected):
            # the seat stays where it was; this is an ordinary outcome, not an error
            return SeatMoveResult(
                accepted=False,
                seat=_seat_out(editor.get(seat_number)),
                reason=result.reason,
                blocking_seat=result.blocking_seat,
            )
        return SeatMoveResult(accepted=True, seat=_seat_out(result))


@app.put("/layouts/{layout_id}/seats/{seat_number}/identifier", response_model=SeatOut)
def set_identifier(layout_id: int, seat_number: int, payload: IdentifierUpdate, store: LayoutStore = Depends(get_store)) -> SeatOut:
    session = _layout(layout_id, store)
    editor = session.editor
    with session.lock:
        try:
            editor.get(seat_number)
        except SeatLayoutError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        try:
            prompt = editor.open_identifier_prompt(seat_number, validator=ip_identifier if payload.validate_ip else None)
        except SeatLayoutError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        result = prompt.submit(payload.identifier)
        if not isinstance(result, SeatDefinition):
            prompt.cancel()
            raise HTTPException(status_code=400, detail=result.message)
        return _seat_out(result)


@app.get("/layouts/{layout_id}/submission", response_model=list[SubmissionItem])
def layout_submission(layout_id: int, store: LayoutStore = Depends(get_store)) -> list[SubmissionItem]:
    session = _layout(layout_id, store)
    with session.lock:
        return [SubmissionItem(**s.to_dict()) for s in session.editor.to_submission()]


@app.get("/layouts/{layout_id}/preview", response_class=PlainTextResponse)
def layout_preview(layout_id: int, width: int = 6, store: LayoutStore = Depends(get_store)) -> str:
    session = _layout(layout_id, store)
    with session.lock:
        return render_layout(session.editor.seats, cell_width=width)


@app.post("/occupancy/status", response_model=RenderOut)
def render_status(payload: StatusRenderRequest) -> RenderOut:
    cell_size = payload.cell_size or load_settings().viewer_cell_size
    seats = merge_positions_with_status(_positions(payload.positions), payload.statuses, cell_size)
    out = _render_out(seats, cell_size)
    summary = occupancy_summary(seats)
    out.summary = OccupancySummaryOut(
        total=summary.total,
        occupied=summary.occupied,
        available=summary.available,
        utilization=summary.utilization,
        band=summary.band,
    )
    return out


@app.post("/occupancy/usage", response_model=RenderOut)
def render_usage(payload: UsageRenderRequest) -> RenderOut:
    cell_size = payload.cell_size or load_settings().viewer_cell_size
    seats = merge_positions_with_usage(_positions(payload.positions), payload.usage, cell_size)
    return _render_out(seats, cell_size, heat=True)


@app.post("/utilization/summary", response_model=UtilizationSummaryOut)
def utilization_summary(payload: UtilizationSummaryRequest) -> UtilizationSummaryOut:
    summary = summarize_history(
        UtilizationRecord(venue_id=r.venue_id, utilization=r.utilization, recorded_at=r.recorded_at, name=r.name)
        for r in payload.records
    )
    return UtilizationSummaryOut(
        name=summary.name,
        current=summary.current,
        change=summary.change,
        points=[
            ChartPointOut(recorded_at=p.recorded_at, time=p.time_label, date=p.date_label, utilization=p.utilization)
            for p in summary.points
        ],
    )
