"""Async HTTP client for the todo API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ..timestamps import format_timestamp
from .errors import ApiError, ApiNetworkError, ApiNotFoundError, ApiValidationError
from .models import Todo
from .settings import ClientSettings, get_client_settings

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


def _write_body(text: str, scheduled_at: Optional[datetime]) -> Dict[str, Any]:
    return {
        "text": text,
        "scheduledAt": format_timestamp(scheduled_at) if scheduled_at is not None else None,
    }


class TodoApiClient:
    """
    Client for the /todos endpoints.

    Every call either returns the server's data or raises an ApiError subclass:
    ApiValidationError for 400, ApiNotFoundError for 404 and ApiNetworkError
    for transport failures and any other status.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[ClientSettings] = None,
    ) -> None:
        if base_url is None or timeout is None:
            settings = settings or get_client_settings()
            base_url = base_url or settings.api_url
            timeout = timeout if timeout is not None else settings.http_timeout
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "TodoApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, failure: str, json: Any = None) -> httpx.Response:
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiNetworkError(failure) from exc

        if response.is_success:
            return response

        message = _error_message(response)
        logger.debug("%s %s -> %s %s", method, url, response.status_code, message)
        if response.status_code == 400:
            raise ApiValidationError(message or failure, status_code=400)
        if response.status_code == 404:
            raise ApiNotFoundError(message or failure, status_code=404)
        raise ApiNetworkError(failure, status_code=response.status_code)

    def _parse_todo(self, response: httpx.Response, failure: str) -> Todo:
        try:
            return Todo.model_validate(response.json())
        except ValueError as exc:
            # pydantic.ValidationError and JSON decode errors are both ValueErrors
            raise ApiError(failure, status_code=response.status_code) from exc

    async def list_todos(self) -> List[Todo]:
        failure = "Failed to fetch todos"
        response = await self._request("GET", "/todos", failure)
        try:
            return [Todo.model_validate(item) for item in response.json()]
        except (TypeError, ValueError) as exc:
            raise ApiError(failure, status_code=response.status_code) from exc

    async def create_todo(self, text: str, scheduled_at: Optional[datetime] = None) -> Todo:
        failure = "Failed to add todo"
        response = await self._request("POST", "/todos", failure, json=_write_body(text, scheduled_at))
        return self._parse_todo(response, failure)

    async def update_todo(self, todo_id: str, text: str, scheduled_at: Optional[datetime] = None) -> Todo:
        """Replace text and schedule; a scheduled_at of None clears the schedule."""
        failure = "Failed to update todo"
        response = await self._request(
            "PUT", f"/todos/{todo_id}", failure, json=_write_body(text, scheduled_at)
        )
        return self._parse_todo(response, failure)

    async def delete_todo(self, todo_id: str) -> None:
        await self._request("DELETE", f"/todos/{todo_id}", "Failed to delete todo")
