from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from .api_client import TodoApiClient
from .calendar_view import CalendarView
from .list_view import TodoListView
from .settings import ClientSettings, get_client_settings
from .state import TodoStore

DEFAULT_SIDEBAR_WIDTH = 384.0


@dataclass
class SplitLayout:
    """
    List sidebar beside the calendar, separated by a draggable divider.
    The sidebar stays between a quarter and half of the container width.
    """

    sidebar_width: float = DEFAULT_SIDEBAR_WIDTH
    resizing: bool = False

    def start_resize(self) -> None:
        self.resizing = True

    def resize(self, pointer_x: float, container_left: float, container_width: float) -> float:
        if self.resizing:
            lo, hi = container_width / 4, container_width * 0.5
            self.sidebar_width = min(max(pointer_x - container_left, lo), hi)
        return self.sidebar_width

    def stop_resize(self) -> None:
        self.resizing = False


class TodoCalendarApp:
    """
    One client session: API client, todo store, list view and calendar view
    sharing the same store and drag coordinator.
    """

    def __init__(
        self,
        api: TodoApiClient,
        settings: Optional[ClientSettings] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.settings = settings or get_client_settings()
        self.api = api
        self.store = TodoStore(api)
        self.list_view = TodoListView(self.store, self.settings.timezone)
        self.calendar_view = CalendarView(self.store, self.settings.timezone, today=today)
        self.layout = SplitLayout()

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "TodoCalendarApp":
        settings = settings or get_client_settings()
        return cls(TodoApiClient(settings=settings), settings)

    async def start(self) -> None:
        """Initial load of the todo collection."""
        await self.store.load()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "TodoCalendarApp":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
