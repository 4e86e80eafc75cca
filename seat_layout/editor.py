from __future__ import annotations

import ipaddress
import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from .config import load_settings
from .grid import GridGeometry, Number, SeatLayoutError, collides


# Returns an error message, or None when the value is acceptable.
IdentifierValidator = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class SeatDefinition:
    seat_number: int
    column: int
    row: int
    pixel_x: Number
    pixel_y: Number
    identifier: str = ""


@dataclass(frozen=True)
class DragRejected:
    seat_number: int
    column: int
    row: int
    reason: str = "collision"
    blocking_seat: Optional[int] = None


@dataclass(frozen=True)
class IdentifierRejected:
    seat_number: int
    value: str
    message: str


@dataclass(frozen=True)
class SeatSubmission:
    seat_number: int
    column: int
    row: int
    identifier: str
    name: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "seat_number": self.seat_number,
            "column": self.column,
            "row": self.row,
            "identifier": self.identifier,
        }


@dataclass(frozen=True)
class LayoutForm:
    """What the operator typed into the layout form; zeros mean not filled in yet."""

    name: str = ""
    seat_count: int = 0
    columns: int = 0
    rows: int = 0
    port: int = 0


def ip_identifier(value: str) -> Optional[str]:
    if value == "":
        return None
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return f"not an IP address: {value!r}"
    return None


def _seat_at_cell(column: int, row: int, seats: Iterable[SeatDefinition]) -> Optional[int]:
    for s in seats:
        if s.column == column and s.row == row:
            return s.seat_number
    return None


def generate_layout(
    total_seats: int,
    columns: int,
    rows: int,
    cell_size: Number,
    existing: Iterable[SeatDefinition] = (),
) -> list[SeatDefinition]:
    """
    Fill a columns x rows grid row by row, left to right.

    Stops after ``total_seats`` seats or when the grid runs out of cells,
    whichever comes first; callers compare ``len(result)`` with
    ``total_seats`` to detect truncation. Cells already taken by
    ``existing`` seats are skipped and numbering continues after the
    highest existing seat number. Non-positive counts give an empty layout.
    """
    geometry = GridGeometry(cell_size)
    if total_seats <= 0 or columns <= 0 or rows <= 0:
        return []

    existing = list(existing)
    seat_number = max((s.seat_number for s in existing), default=0) + 1
    placed: list[SeatDefinition] = []
    for row in range(1, rows + 1):
        for column in range(1, columns + 1):
            if len(placed) >= total_seats:
                return placed
            if collides(column, row, seat_number, existing):
                continue
            x, y = geometry.to_pixel(column, row)
            placed.append(SeatDefinition(seat_number, column, row, x, y))
            seat_number += 1

    if len(placed) < total_seats:
        logger.info(
            "layout truncated: {} of {} seats fit a {}x{} grid",
            len(placed),
            total_seats,
            columns,
            rows,
        )
    return placed


def move_seat(
    seat_number: int,
    raw_x: float,
    raw_y: float,
    cell_size: Number,
    seats: Iterable[SeatDefinition],
) -> Union[SeatDefinition, DragRejected]:
    seats = list(seats)
    current = next((s for s in seats if s.seat_number == seat_number), None)
    if current is None:
        raise SeatLayoutError(f"unknown seat number: {seat_number}")

    geometry = GridGeometry(cell_size)
    if not (math.isfinite(raw_x) and math.isfinite(raw_y)):
        logger.debug("seat {} drop at ({}, {}) rejected, not a position", seat_number, raw_x, raw_y)
        return DragRejected(seat_number, current.column, current.row, reason="invalid-position")
    column, row = geometry.to_cell(raw_x, raw_y)
    if collides(column, row, seat_number, seats):
        blocking = _seat_at_cell(column, row, (s for s in seats if s.seat_number != seat_number))
        logger.debug("seat {} drop on C{}R{} rejected, taken by seat {}", seat_number, column, row, blocking)
        return DragRejected(seat_number, column, row, blocking_seat=blocking)

    x, y = geometry.to_pixel(column, row)
    return replace(current, column=column, row=row, pixel_x=x, pixel_y=y)


class IdentifierPrompt:
    """
    A modal request for one seat's identifier.

    While the prompt is open the editor refuses drags. ``submit`` validates
    and applies the value; ``cancel`` closes the prompt leaving the seat as
    it was. A closed prompt cannot be reused.
    """

    def __init__(
        self,
        editor: "SeatLayoutEditor",
        seat_number: int,
        initial: str,
        validator: Optional[IdentifierValidator] = None,
    ):
        self._editor = editor
        self.seat_number = seat_number
        self.initial = initial
        self.validator = validator
        self.is_open = True

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise SeatLayoutError(f"identifier prompt for seat {self.seat_number} is closed")

    def submit(self, value: str) -> Union[SeatDefinition, IdentifierRejected]:
        self._ensure_open()
        value = (value or "").strip()
        if self.validator is not None:
            message = self.validator(value)
            if message:
                # stays open so the operator can correct the value
                return IdentifierRejected(self.seat_number, value, message)
        self._close()
        return self._editor.assign_identifier(self.seat_number, value)

    def cancel(self) -> None:
        self._ensure_open()
        self._close()

    def _close(self) -> None:
        self.is_open = False
        self._editor._prompt_closed(self)


class SeatLayoutEditor:
    """
    Interactive authoring state for one venue's seat layout.

    Holds the current seats, the seat being dragged and at most one open
    identifier prompt. Nothing is sent anywhere until ``to_submission``.
    """

    def __init__(self, cell_size: Optional[Number] = None, name: str = ""):
        if cell_size is None:
            cell_size = load_settings().editor_cell_size
        self.geometry = GridGeometry(cell_size)
        self.name = name
        self.seats: list[SeatDefinition] = []
        self.dragging: Optional[int] = None
        self.prompt: Optional[IdentifierPrompt] = None

    @property
    def cell_size(self) -> Number:
        return self.geometry.cell_size

    def get(self, seat_number: int) -> SeatDefinition:
        for s in self.seats:
            if s.seat_number == seat_number:
                return s
        raise SeatLayoutError(f"unknown seat number: {seat_number}")

    def generate_layout(self, total_seats: int, columns: int, rows: int) -> list[SeatDefinition]:
        self.reset()
        self.seats = generate_layout(total_seats, columns, rows, self.cell_size)
        return list(self.seats)

    def generate_from_form(self, form: LayoutForm) -> list[SeatDefinition]:
        self.name = form.name
        return self.generate_layout(form.seat_count, form.columns, form.rows)

    def add_seats(self, total_seats: int, columns: int, rows: int) -> list[SeatDefinition]:
        """Place more seats into free cells without disturbing the existing ones."""
        added = generate_layout(total_seats, columns, rows, self.cell_size, existing=self.seats)
        self.seats.extend(added)
        return added

    def reset(self) -> None:
        if self.prompt is not None:
            self.prompt.is_open = False
        self.seats = []
        self.dragging = None
        self.prompt = None

    def begin_drag(self, seat_number: int) -> Union[SeatDefinition, DragRejected]:
        seat = self.get(seat_number)
        if self.prompt is not None:
            return DragRejected(seat_number, seat.column, seat.row, reason="prompt-open")
        self.dragging = seat_number
        return seat

    def end_drag(self, seat_number: int, raw_x: float, raw_y: float) -> Union[SeatDefinition, DragRejected]:
        seat = self.get(seat_number)
        self.dragging = None
        if self.prompt is not None:
            return DragRejected(seat_number, seat.column, seat.row, reason="prompt-open")

        result = move_seat(seat_number, raw_x, raw_y, self.cell_size, self.seats)
        if isinstance(result, SeatDefinition):
            self._replace(result)
        return result

    def assign_identifier(self, seat_number: int, identifier: str) -> SeatDefinition:
        updated = replace(self.get(seat_number), identifier=identifier)
        self._replace(updated)
        return updated

    def open_identifier_prompt(
        self,
        seat_number: int,
        validator: Optional[IdentifierValidator] = None,
    ) -> IdentifierPrompt:
        seat = self.get(seat_number)
        if self.prompt is not None:
            raise SeatLayoutError(f"identifier prompt already open for seat {self.prompt.seat_number}")
        self.prompt = IdentifierPrompt(self, seat_number, seat.identifier, validator)
        return self.prompt

    def _prompt_closed(self, prompt: IdentifierPrompt) -> None:
        if self.prompt is prompt:
            self.prompt = None

    def _replace(self, seat: SeatDefinition) -> None:
        self.seats = [seat if s.seat_number == seat.seat_number else s for s in self.seats]

    def to_submission(self) -> list[SeatSubmission]:
        return to_submission(self.seats, name=self.name)


def to_submission(seats: Iterable[SeatDefinition], *, name: str = "") -> list[SeatSubmission]:
    return [
        SeatSubmission(
            seat_number=s.seat_number,
            column=s.column,
            row=s.row,
            identifier=s.identifier,
            name=name,
        )
        for s in seats
    ]
