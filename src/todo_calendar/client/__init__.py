"""
Client side of the todo calendar.

``TodoApiClient`` talks to the REST API, ``TodoStore`` holds the session's
todo collection, and ``TodoListView`` / ``CalendarView`` turn that state into
render models. ``TodoCalendarApp`` wires them together.
"""

from .api_client import TodoApiClient
from .app import TodoCalendarApp
from .calendar_view import CalendarView, ViewMode
from .drag import DragCoordinator, DragSession
from .errors import ApiError, ApiNetworkError, ApiNotFoundError, ApiValidationError
from .list_view import TodoListView
from .models import Todo
from .state import TodoStore, sort_todos

__all__ = [
    "ApiError",
    "ApiNetworkError",
    "ApiNotFoundError",
    "ApiValidationError",
    "CalendarView",
    "DragCoordinator",
    "DragSession",
    "Todo",
    "TodoApiClient",
    "TodoCalendarApp",
    "TodoListView",
    "TodoStore",
    "ViewMode",
    "sort_todos",
]
