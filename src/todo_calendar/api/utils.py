from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

from fastapi.responses import JSONResponse

from .schemas import INVALID_SCHEDULE, TEXT_REQUIRED

INVALID_BODY = "Invalid request body"
TODO_NOT_FOUND = "Todo not found"


# PUBLIC_INTERFACE
def error_response(status_code: int, message: str) -> JSONResponse:
    """
    Build the JSON error body used by every failing endpoint.

    Returns:
        JSONResponse with body {"error": message}.
    """
    return JSONResponse(status_code=status_code, content={"error": message})


def _error_fields(errors: Iterable[Dict[str, Any]]) -> Sequence[str]:
    fields = []
    for err in errors:
        loc = err.get("loc") or ()
        # loc is ("body", <field>, ...) for body fields and ("body",) for the body itself
        if len(loc) > 1 and loc[0] == "body":
            fields.append(str(loc[1]))
    return fields


# PUBLIC_INTERFACE
def validation_message(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Collapse request validation errors into a single user-facing message.
    Text problems win over schedule problems; anything else is a malformed body.
    """
    fields = _error_fields(list(errors))
    if "text" in fields:
        return TEXT_REQUIRED
    if "scheduledAt" in fields or "scheduled_at" in fields:
        return INVALID_SCHEDULE
    return INVALID_BODY
