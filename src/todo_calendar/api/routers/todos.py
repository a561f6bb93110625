from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..repositories import Repository, get_repository
from ..schemas import DeleteResult, ErrorOut, TodoOut, TodoWrite

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List every todo. Scheduled todos come first by scheduledAt ascending, "
        "followed by unscheduled todos by createdAt ascending."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
    },
)
def list_todos(repo: Repository = Depends(_get_repo)) -> List[TodoOut]:
    """
    List all todos in store order.
    """
    return [TodoOut(**it) for it in repo.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": ErrorOut, "description": "Text is required / Invalid date/time format"},
    },
)
def create_todo(payload: TodoWrite, repo: Repository = Depends(_get_repo)) -> TodoOut:
    """
    Create a new Todo.
    """
    created = repo.create(payload.text, payload.scheduled_at)
    logger.info("Created todo %s (scheduled=%s)", created["id"], created["scheduled_at"] is not None)
    return TodoOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Replace Todo",
    description=(
        "Replace the text and schedule of an existing Todo. This is not a partial patch: "
        "omitting scheduledAt clears the schedule."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"model": ErrorOut, "description": "Text is required / Invalid date/time format"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def put_todo(todo_id: str, payload: TodoWrite, repo: Repository = Depends(_get_repo)) -> TodoOut:
    """
    Full update of a Todo's text and scheduledAt.
    """
    updated = repo.update(todo_id, payload.text, payload.scheduled_at)
    logger.info("Updated todo %s (scheduled=%s)", todo_id, updated["scheduled_at"] is not None)
    return TodoOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=DeleteResult,
    summary="Delete Todo",
    description="Delete a Todo by ID. Deletion is irreversible.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def delete_todo(todo_id: str, repo: Repository = Depends(_get_repo)) -> DeleteResult:
    """
    Delete a Todo. Returns {"success": true}; 404 if not found.
    """
    repo.delete(todo_id)
    logger.info("Deleted todo %s", todo_id)
    return DeleteResult(success=True)
