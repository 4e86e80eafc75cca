from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Optional

from seat_layout.editor import LayoutForm, SeatLayoutEditor


@dataclass
class LayoutSession:
    id: int
    form: LayoutForm
    editor: SeatLayoutEditor
    # held by every request that reads or changes the editor
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def truncated(self) -> bool:
        return len(self.editor.seats) < max(0, self.form.seat_count)


class LayoutStore:
    """
    Editor sessions kept in process memory until the operator submits.

    Saving the submitted seats is the caller's job; nothing here survives a
    restart.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._sessions: dict[int, LayoutSession] = {}
        self._lock = threading.Lock()

    def create(self, form: LayoutForm, cell_size: Optional[int] = None) -> LayoutSession:
        editor = SeatLayoutEditor(cell_size=cell_size, name=form.name)
        editor.generate_from_form(form)
        with self._lock:
            session = LayoutSession(id=next(self._ids), form=form, editor=editor)
            self._sessions[session.id] = session
        return session

    def get(self, layout_id: int) -> Optional[LayoutSession]:
        return self._sessions.get(layout_id)

    def delete(self, layout_id: int) -> bool:
        with self._lock:
            return self._sessions.pop(layout_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


store = LayoutStore()


def get_store() -> LayoutStore:
    return store
