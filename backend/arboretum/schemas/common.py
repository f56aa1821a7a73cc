"""Response envelopes shared across routers."""
from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    success: bool = True
    message: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"


def require_text(value: str) -> str:
    """Reject strings that are empty once surrounding whitespace is ignored."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must not be empty")
    return value
