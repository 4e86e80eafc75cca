from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .grid import SeatLayoutError


@dataclass(frozen=True)
class Settings:
    editor_cell_size: int = 60
    viewer_cell_size: int = 40
    min_scale: float = 0.5
    max_scale: float = 3.0
    min_opacity: float = 0.1
    log_level: str = "INFO"


def _read(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise SeatLayoutError(f"invalid value for {name}: {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    defaults = Settings()
    settings = Settings(
        editor_cell_size=_read(env, "SEAT_LAYOUT_EDITOR_CELL_SIZE", defaults.editor_cell_size, int),
        viewer_cell_size=_read(env, "SEAT_LAYOUT_VIEWER_CELL_SIZE", defaults.viewer_cell_size, int),
        min_scale=_read(env, "SEAT_LAYOUT_MIN_SCALE", defaults.min_scale, float),
        max_scale=_read(env, "SEAT_LAYOUT_MAX_SCALE", defaults.max_scale, float),
        min_opacity=_read(env, "SEAT_LAYOUT_MIN_OPACITY", defaults.min_opacity, float),
        log_level=_read(env, "SEAT_LAYOUT_LOG_LEVEL", defaults.log_level, str).upper(),
    )
    if settings.editor_cell_size <= 0 or settings.viewer_cell_size <= 0:
        raise SeatLayoutError("cell sizes must be positive integers")
    if not 0 < settings.min_scale < settings.max_scale:
        raise SeatLayoutError(
            f"scale bounds must satisfy 0 < min < max, got {settings.min_scale}..{settings.max_scale}"
        )
    if not 0 <= settings.min_opacity <= 1:
        raise SeatLayoutError("min_opacity must be within [0, 1]")
    return settings
