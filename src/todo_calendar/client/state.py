from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from .api_client import TodoApiClient
from .drag import DragCoordinator
from .errors import ApiError
from .models import Todo

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load todos"

StoreListener = Callable[["TodoStore"], None]


# PUBLIC_INTERFACE
def sort_todos(todos: Iterable[Todo]) -> List[Todo]:
    """
    Return todos in display order:
    - both scheduled: chronological by scheduled_at
    - scheduled before unscheduled
    - both unscheduled: chronological by created_at
    """
    return sorted(todos, key=lambda t: t.sort_key())


class TodoStore:
    """
    The session's todo collection.

    State changes only after the server confirms a mutation. Failed mutations
    raise ApiError to the caller and leave the collection as it was.
    """

    def __init__(self, api: TodoApiClient, drag: Optional[DragCoordinator] = None) -> None:
        self._api = api
        self._todos: List[Todo] = []
        self._listeners: List[StoreListener] = []
        self.is_loading = True
        self.error: Optional[str] = None
        self.drag = drag or DragCoordinator()
        self.drag.subscribe(lambda _session: self._notify())

    @property
    def todos(self) -> List[Todo]:
        return list(self._todos)

    @property
    def dragged_todo_id(self) -> Optional[str]:
        return self.drag.dragged_todo_id

    def get(self, todo_id: str) -> Optional[Todo]:
        return next((t for t in self._todos if t.id == todo_id), None)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call listener after every state change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    async def load(self) -> None:
        """
        Fetch the full list. On failure set a user-visible error and keep the
        last known collection.
        """
        try:
            todos = await self._api.list_todos()
        except ApiError as exc:
            logger.error("Failed to fetch todos: %s", exc)
            self.error = LOAD_ERROR
        else:
            self._todos = sort_todos(todos)
            self.error = None
        finally:
            self.is_loading = False
        self._notify()

    refresh = load

    async def add_todo(self, text: str, scheduled_at: Optional[datetime] = None) -> Todo:
        created = await self._api.create_todo(text, scheduled_at)
        self._todos = sort_todos([*self._todos, created])
        self._notify()
        return created

    async def update_todo(self, todo_id: str, text: str, scheduled_at: Optional[datetime] = None) -> Todo:
        """Replace text and schedule. Passing no scheduled_at clears the schedule."""
        updated = await self._api.update_todo(todo_id, text, scheduled_at)
        self._todos = sort_todos(updated if t.id == todo_id else t for t in self._todos)
        self._notify()
        return updated

    async def delete_todo(self, todo_id: str) -> None:
        await self._api.delete_todo(todo_id)
        self._todos = [t for t in self._todos if t.id != todo_id]
        self._notify()

    def set_dragged_todo_id(self, todo_id: Optional[str]) -> None:
        if todo_id is None:
            self.drag.end()
        else:
            self.drag.begin(todo_id)
