from __future__ import annotations

"""Miscellaneous response schemas that don't fit elsewhere."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Generic API response wrapper with a human-readable message."""

    message: str = Field(..., examples=["Reset code sent to email"])
