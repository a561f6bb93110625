from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Callable, Iterable, List, Optional

from .drag import DragSession, DropTargets, Point, Rect
from .errors import ApiError
from .formatting import (
    format_long_date,
    format_task_badge,
    format_time,
    local_midnight,
    month_caption,
    same_local_day,
    week_caption,
)
from .models import Todo
from .state import TodoStore

logger = logging.getLogger(__name__)

EMPTY_AGENDA = "No tasks scheduled for this day"
DROP_HINT = "Drop on a date to schedule"

# weeks start on Sunday
_WEEK = calendar.Calendar(firstweekday=calendar.SUNDAY)


class ViewMode(str, Enum):
    MONTH = "month"
    WEEK = "week"


@dataclass(frozen=True)
class DayCell:
    date: date
    weekday: str
    in_month: bool
    is_today: bool
    is_selected: bool
    todo_count: int
    badge: str
    drag_over: bool


@dataclass(frozen=True)
class AgendaEntry:
    todo_id: str
    time_label: str
    text: str


# PUBLIC_INTERFACE
def week_days(anchor: date) -> List[date]:
    """The Sunday..Saturday week containing anchor."""
    start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
    return [start + timedelta(days=i) for i in range(7)]


# PUBLIC_INTERFACE
def month_weeks(year: int, month: int) -> List[List[date]]:
    """Weeks of the month grid, Sunday first, padded with days of adjacent months."""
    return _WEEK.monthdatescalendar(year, month)


# PUBLIC_INTERFACE
def todos_for_date(todos: Iterable[Todo], day: date, tz: tzinfo) -> List[Todo]:
    """Todos scheduled on day (local date, time ignored), chronological."""
    matching = [t for t in todos if t.scheduled_at is not None and same_local_day(t.scheduled_at, day, tz)]
    return sorted(matching, key=lambda t: t.scheduled_at)


def _shift_month(first: date, months: int) -> date:
    index = first.year * 12 + (first.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class CalendarView:
    """
    Month grid and week strip over the store's todos.

    Accepts drops of the dragged todo: the todo is rescheduled to local
    midnight of the target day, which makes it a date-only todo.
    """

    def __init__(self, store: TodoStore, tz: tzinfo, today: Optional[Callable[[], date]] = None) -> None:
        self.store = store
        self.tz = tz
        self._today = today or (lambda: datetime.now(self.tz).date())
        current = self._today()
        self.view_mode = ViewMode.MONTH
        self.selected_date: Optional[date] = current
        self.week_anchor = current
        self.visible_month = current.replace(day=1)
        self.hovered_date: Optional[date] = None
        self.targets = DropTargets()
        store.drag.subscribe(self._on_drag_changed)

    def _on_drag_changed(self, session: Optional[DragSession]) -> None:
        if session is None:
            self.hovered_date = None

    @property
    def today(self) -> date:
        return self._today()

    @property
    def drag_active(self) -> bool:
        return self.store.dragged_todo_id is not None

    def drop_hint(self) -> Optional[str]:
        return DROP_HINT if self.drag_active else None

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)
        self.targets.clear()

    def select_date(self, day: Optional[date]) -> None:
        self.selected_date = day

    # Navigation

    def navigate_week(self, direction: int) -> None:
        """Move the week strip by whole weeks; direction is +1 or -1."""
        self.week_anchor = self.week_anchor + timedelta(days=7 * direction)
        self.targets.clear()

    def navigate_month(self, direction: int) -> None:
        self.visible_month = _shift_month(self.visible_month, direction)
        self.targets.clear()

    def go_to_today(self) -> None:
        current = self._today()
        self.week_anchor = current
        self.visible_month = current.replace(day=1)
        self.selected_date = current
        self.targets.clear()

    # Render models

    def week_caption(self) -> str:
        return week_caption(week_days(self.week_anchor))

    def month_caption(self) -> str:
        return month_caption(self.visible_month)

    def selected_caption(self) -> Optional[str]:
        if self.selected_date is None:
            return None
        return f"Selected: {format_long_date(self.selected_date)}"

    def _cell(self, day: date, todos: List[Todo], today: date, month: Optional[int] = None) -> DayCell:
        count = len(todos_for_date(todos, day, self.tz))
        return DayCell(
            date=day,
            weekday=f"{day:%a}",
            in_month=month is None or day.month == month,
            is_today=day == today,
            is_selected=day == self.selected_date,
            todo_count=count,
            badge=format_task_badge(count),
            drag_over=day == self.hovered_date,
        )

    def week_cells(self) -> List[DayCell]:
        todos, today = self.store.todos, self._today()
        return [self._cell(day, todos, today) for day in week_days(self.week_anchor)]

    def month_cells(self) -> List[List[DayCell]]:
        todos, today = self.store.todos, self._today()
        month = self.visible_month.month
        return [
            [self._cell(day, todos, today, month) for day in week]
            for week in month_weeks(self.visible_month.year, month)
        ]

    def agenda(self, day: Optional[date] = None) -> List[AgendaEntry]:
        """Entries for day (default: the selected day)."""
        day = day or self.selected_date
        if day is None:
            return []
        return [
            AgendaEntry(todo_id=t.id, time_label=format_time(t.scheduled_at, self.tz), text=t.text)
            for t in todos_for_date(self.store.todos, day, self.tz)
        ]

    # Drag and drop

    def register_cell(self, day: date, left: float, top: float, width: float, height: float) -> None:
        """Called by the renderer with each day cell's on-screen rectangle."""
        self.targets.register(day, Rect(left, top, width, height))

    def drag_over(self, x: float, y: float) -> Optional[date]:
        """Track the pointer during a drag and return the day cell under it."""
        if self.store.drag.move(x, y) is None:
            return None
        self.hovered_date = self.targets.day_at(Point(x, y))
        return self.hovered_date

    def drag_leave(self) -> None:
        self.hovered_date = None

    async def drop_at(self, x: float, y: float) -> bool:
        """Drop at a pointer position; resolves the day cell and reschedules."""
        self.hovered_date = None
        day = self.targets.day_at(Point(x, y))
        if day is None:
            return False
        return await self.drop_on_day(day)

    async def drop_on_day(self, day: date) -> bool:
        """
        Schedule the dragged todo at midnight of day, keeping its text, then
        select day. Any previous time of day is discarded.
        """
        self.hovered_date = None
        todo_id = self.store.dragged_todo_id
        if todo_id is None:
            return False
        todo = self.store.get(todo_id)
        if todo is None:
            self.store.set_dragged_todo_id(None)
            return False

        try:
            await self.store.update_todo(todo_id, todo.text, local_midnight(day, self.tz))
        except ApiError as exc:
            logger.error("Failed to update todo: %s", exc)
            return False
        else:
            self.select_date(day)
            return True
        finally:
            self.store.set_dragged_todo_id(None)
