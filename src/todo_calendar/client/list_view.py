from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Dict, List, Optional

from .errors import ApiError
from .formatting import combine_date_time, date_input_value, format_date_time, time_input_value
from .state import TodoStore

logger = logging.getLogger(__name__)

EMPTY_TEXT_ERROR = "Please enter a todo description"
INVALID_DATE_ERROR = "Invalid date/time format"
ADD_FAILED = "Failed to add todo"
DRAG_MIME = "text/plain"


@dataclass
class TodoForm:
    """Text, date ('YYYY-MM-DD') and time ('HH:MM') inputs; date and time are optional."""

    text: str = ""
    date: str = ""
    time: str = ""

    def clear(self) -> None:
        self.text = ""
        self.date = ""
        self.time = ""


@dataclass(frozen=True)
class TodoRow:
    id: str
    text: str
    label: str
    scheduled: bool
    draggable: bool
    editing: bool


class TodoListView:
    """
    The todo list: add form, rows in store order, inline editing and the
    drag source for unscheduled todos.
    """

    def __init__(self, store: TodoStore, tz: tzinfo) -> None:
        self.store = store
        self.tz = tz
        self.form = TodoForm()
        self.is_submitting = False
        self.error: Optional[str] = None
        self.editing_id: Optional[str] = None
        self.edit_form = TodoForm()

    def placeholder(self) -> Optional[str]:
        """Message shown instead of the rows, if any."""
        if self.store.is_loading:
            return "Loading todos..."
        if self.store.error:
            return self.store.error
        if not self.store.todos:
            return "No todos yet"
        return None

    def rows(self) -> List[TodoRow]:
        rows = []
        for todo in self.store.todos:
            editing = todo.id == self.editing_id
            rows.append(
                TodoRow(
                    id=todo.id,
                    text=todo.text,
                    label=format_date_time(todo.scheduled_at, self.tz),
                    scheduled=todo.is_scheduled,
                    draggable=not todo.is_scheduled and not editing,
                    editing=editing,
                )
            )
        return rows

    async def submit(self) -> bool:
        """Create a todo from the add form. Returns True when the todo was added."""
        self.error = None
        if not self.form.text.strip():
            self.error = EMPTY_TEXT_ERROR
            return False

        try:
            scheduled_at = combine_date_time(self.form.date, self.form.time, self.tz)
        except ValueError:
            self.error = INVALID_DATE_ERROR
            return False

        self.is_submitting = True
        try:
            await self.store.add_todo(self.form.text, scheduled_at)
        except ApiError as exc:
            logger.error("Failed to add todo: %s", exc)
            self.error = exc.message or ADD_FAILED
            return False
        finally:
            self.is_submitting = False

        self.form.clear()
        return True

    def start_editing(self, todo_id: str) -> None:
        todo = self.store.get(todo_id)
        if todo is None:
            return
        self.editing_id = todo.id
        self.edit_form = TodoForm(
            text=todo.text,
            date=date_input_value(todo.scheduled_at, self.tz),
            time=time_input_value(todo.scheduled_at, self.tz),
        )

    def cancel_editing(self) -> None:
        self.editing_id = None
        self.edit_form = TodoForm()

    async def save_edit(self) -> bool:
        """
        Send the edit form as a full replacement. An empty date clears the schedule.
        Blank text is ignored; on failure the row stays in edit mode.
        """
        if self.editing_id is None or not self.edit_form.text.strip():
            return False

        try:
            scheduled_at = combine_date_time(self.edit_form.date, self.edit_form.time, self.tz)
            await self.store.update_todo(self.editing_id, self.edit_form.text, scheduled_at)
        except (ApiError, ValueError) as exc:
            logger.error("Failed to update todo: %s", exc)
            return False

        self.cancel_editing()
        return True

    async def delete(self, todo_id: str) -> bool:
        try:
            await self.store.delete_todo(todo_id)
        except ApiError as exc:
            logger.error("Failed to delete todo: %s", exc)
            return False
        return True

    def drag_start(self, todo_id: str) -> Optional[Dict[str, str]]:
        """
        Start dragging an unscheduled todo. Returns the transfer payload, or None
        when the todo cannot be dragged (scheduled, being edited, or unknown).
        """
        todo = self.store.get(todo_id)
        if todo is None or todo.is_scheduled or todo_id == self.editing_id:
            return None
        self.store.set_dragged_todo_id(todo_id)
        return {DRAG_MIME: todo_id}

    def drag_end(self) -> None:
        self.store.set_dragged_todo_id(None)
