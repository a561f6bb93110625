"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .settings import get_settings


def main() -> None:
    """Run the development server."""
    settings = get_settings()
    uvicorn.run(
        "todo_calendar.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
