"""
Drag-and-drop coordination between the list and the calendar.

The list starts a drag, the calendar receives pointer moves and the drop.
Both sides share one DragCoordinator; the current drag is an immutable
DragSession value (dragged todo id + last pointer position). Day cells
register their on-screen rectangles in DropTargets so the calendar can tell
which day is under the pointer without querying the renderer.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, point: Point) -> bool:
        # edges inclusive
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class DragSession:
    """A drag in progress."""

    todo_id: str
    pointer: Optional[Point] = None

    def moved_to(self, point: Point) -> "DragSession":
        return replace(self, pointer=point)


DragListener = Callable[[Optional[DragSession]], None]


class DragCoordinator:
    """Holds the current DragSession and notifies subscribers when it changes."""

    def __init__(self) -> None:
        self._session: Optional[DragSession] = None
        self._listeners: List[DragListener] = []

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def dragged_todo_id(self) -> Optional[str]:
        return self._session.todo_id if self._session else None

    def subscribe(self, listener: DragListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, session: Optional[DragSession]) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    def begin(self, todo_id: str) -> DragSession:
        session = DragSession(todo_id)
        self._set(session)
        return session

    def move(self, x: float, y: float) -> Optional[DragSession]:
        """Record the pointer position. Ignored when no drag is active."""
        if self._session is None:
            return None
        self._set(self._session.moved_to(Point(x, y)))
        return self._session

    def end(self) -> None:
        if self._session is not None:
            self._set(None)


class DropTargets:
    """Day cell rectangles as laid out by the renderer."""

    def __init__(self) -> None:
        self._cells: Dict[date, Rect] = {}

    def __len__(self) -> int:
        return len(self._cells)

    def register(self, day: date, rect: Rect) -> None:
        self._cells.pop(day, None)
        self._cells[day] = rect

    def clear(self) -> None:
        self._cells.clear()

    def day_at(self, point: Point) -> Optional[date]:
        # on a shared edge the most recently registered cell wins
        for day, rect in reversed(self._cells.items()):
            if rect.contains(point):
                return day
        return None
