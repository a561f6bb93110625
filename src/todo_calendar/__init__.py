"""
Todo Calendar: a todo list with a drag-and-drop scheduling calendar.

Subpackages:
- todo_calendar.api: FastAPI service and record stores
- todo_calendar.client: async API client, client state and headless views
"""

__version__ = "0.1.0"
