from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .config import load_settings
from .grid import SeatLayoutError


IDLE = "idle"
PINCHING = "pinching"


@dataclass(frozen=True)
class TouchPoint:
    client_x: float
    client_y: float


@dataclass(frozen=True)
class ZoomState:
    scale: float
    last_pinch_distance: Optional[float] = None

    @property
    def phase(self) -> str:
        return IDLE if self.last_pinch_distance is None else PINCHING


@dataclass(frozen=True)
class GestureResult:
    # consumed=True means the host should suppress its default scroll/zoom
    consumed: bool
    scale: float


def touch_distance(a: TouchPoint, b: TouchPoint) -> float:
    return math.hypot(a.client_x - b.client_x, a.client_y - b.client_y)


class PinchZoomController:
    """
    Turns two-finger touch sequences into a bounded zoom factor.

    One instance per zoomable view. The scale survives between gestures;
    only the last pinch distance is forgotten when a finger lifts.
    """

    def __init__(
        self,
        min_scale: Optional[float] = None,
        max_scale: Optional[float] = None,
        initial_scale: float = 1.0,
    ):
        if min_scale is None or max_scale is None:
            settings = load_settings()
            min_scale = settings.min_scale if min_scale is None else min_scale
            max_scale = settings.max_scale if max_scale is None else max_scale
        if not 0 < min_scale < max_scale:
            raise SeatLayoutError(f"invalid scale bounds: {min_scale}..{max_scale}")
        self.min_scale = float(min_scale)
        self.max_scale = float(max_scale)
        self.initial_scale = self._clamp(initial_scale)
        self._scale = self.initial_scale
        self._last_distance: Optional[float] = None

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def state(self) -> ZoomState:
        return ZoomState(scale=self._scale, last_pinch_distance=self._last_distance)

    @property
    def phase(self) -> str:
        return self.state.phase

    def _clamp(self, value: float) -> float:
        return min(max(value, self.min_scale), self.max_scale)

    def _result(self, consumed: bool) -> GestureResult:
        return GestureResult(consumed=consumed, scale=self._scale)

    def begin_pinch(self, distance: float) -> GestureResult:
        self._last_distance = float(distance)
        return self._result(True)

    def update_pinch(self, distance: float) -> GestureResult:
        if self._last_distance is None:
            return self._result(False)
        distance = float(distance)
        if self._last_distance > 0:
            self._scale = self._clamp(self._scale * (distance / self._last_distance))
        self._last_distance = distance
        return self._result(True)

    def end_pinch(self) -> GestureResult:
        was_pinching = self._last_distance is not None
        self._last_distance = None
        return self._result(was_pinching)

    def touch_start(self, touches: Sequence[TouchPoint]) -> GestureResult:
        if len(touches) == 2:
            return self.begin_pinch(touch_distance(touches[0], touches[1]))
        return self._result(False)

    def touch_move(self, touches: Sequence[TouchPoint]) -> GestureResult:
        if len(touches) == 2:
            return self.update_pinch(touch_distance(touches[0], touches[1]))
        return self._result(False)

    def touch_end(self, remaining: Sequence[TouchPoint]) -> GestureResult:
        """Handle touchend/touchcancel; ``remaining`` are the fingers still down."""
        if len(remaining) < 2:
            return self.end_pinch()
        return self._result(False)

    touch_cancel = touch_end

    def replay(self, distances: Iterable[float]) -> float:
        """Apply one complete gesture given its distance samples, first sample starting it."""
        samples = iter(distances)
        first = next(samples, None)
        if first is None:
            return self._scale
        self.begin_pinch(first)
        for d in samples:
            self.update_pinch(d)
        self.end_pinch()
        return self._scale

    def reset(self) -> None:
        self._scale = self.initial_scale
        self._last_distance = None
