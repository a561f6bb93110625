"""
FastAPI Todo Calendar backend package.

The application instance lives in todo_calendar.api.main (``app``), built by
``create_app``. Record stores live in ``repositories`` (in-memory) and ``db``
(SQLite).
"""
