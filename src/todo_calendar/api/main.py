import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..logging_config import setup_logging
from .repositories import TodoNotFoundError
from .routers import todos as todos_router
from .settings import Settings, get_settings
from .utils import TODO_NOT_FOUND, error_response, validation_message

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "CRUD operations for Todo items, ordered by schedule.",
    },
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application: logging, CORS, error handlers and routes.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title="Todo Calendar",
        description="Todo list API backing a drag-and-drop scheduling calendar.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return 400 with a single message for request validation errors.

        Response format:
            {"error": "Text is required" | "Invalid date/time format" | "Invalid request body"}
        """
        message = validation_message(exc.errors())
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
        return error_response(400, message)

    @app.exception_handler(TodoNotFoundError)
    async def not_found_exception_handler(request: Request, exc: TodoNotFoundError) -> JSONResponse:
        """
        Return 404 {"error": "Todo not found"} when the store has no such id.
        """
        logger.warning("%s %s: no todo with id %s", request.method, request.url.path, exc.todo_id)
        return error_response(404, TODO_NOT_FOUND)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(todos_router.router)
    return app


app = create_app()
