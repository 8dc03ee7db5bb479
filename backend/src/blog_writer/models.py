"""Pydantic models for API request/response."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class RenderRequest(BaseModel):
    text: str = ""


class RenderResponse(BaseModel):
    nodes: list[dict[str, Any]] = Field(default_factory=list)
    html: str = ""


class GenerateRequest(BaseModel):
    prompt: str


class ShellStateResponse(BaseModel):
    kind: Literal["idle", "loading", "error", "result"]
    prompt: str | None = None
    message: str | None = None
    content: str | None = None
    nodes: list[dict[str, Any]] | None = None
    html: str | None = None
    copied: bool = False


class SessionResponse(BaseModel):
    session_id: str
    state: ShellStateResponse


class CopyRequest(BaseModel):
    """Outcome of the browser's clipboard write."""

    ok: bool = True
    error: str = ""


class CopyResponse(BaseModel):
    copied: bool
    text: str = ""
    reset_seconds: float = 0.0
