"""API routes: render, sessions, generation, state stream, copy."""

from __future__ import annotations

import asyncio
import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any, AsyncGenerator

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse

from .. import config
from ..models import (
    CopyRequest,
    CopyResponse,
    GenerateRequest,
    RenderRequest,
    RenderResponse,
    SessionResponse,
    ShellStateResponse,
)
from ..services.html_renderer import render_html
from ..services.markdown_parser import render_markdown
from ..services.nodes import nodes_to_dicts
from ..services.shell import (
    InteractionShell,
    LoadingState,
    ResultState,
    Session,
    create_session,
    get_session,
)

router = APIRouter(prefix="/api", tags=["api"])
_executor = ThreadPoolExecutor(max_workers=4)

STREAM_POLL_INTERVAL = 0.3


def _run_generation(shell: InteractionShell, prompt: str) -> None:
    """Worker-thread entry: drive the async generation on its own event loop."""
    asyncio.run(shell.complete(prompt))


def _state_response(shell: InteractionShell) -> ShellStateResponse:
    state = shell.state
    data: dict[str, Any] = state.to_dict()
    if isinstance(state, ResultState):
        data["html"] = render_html(list(state.nodes))
    return ShellStateResponse(**data, copied=shell.copied)


def _require_session(session_id: str) -> Session:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


@router.get("/health")
async def api_health():
    return {"status": "ok"}


@router.post("/render", response_model=RenderResponse)
async def api_render(body: RenderRequest):
    """Render markdown text to content nodes and safe HTML."""
    nodes = render_markdown(body.text)
    return RenderResponse(nodes=nodes_to_dicts(nodes), html=render_html(nodes))


@router.post("/sessions", response_model=SessionResponse)
async def api_create_session():
    session = create_session()
    return SessionResponse(session_id=session.session_id, state=_state_response(session.shell))


@router.get("/sessions/{session_id}", response_model=ShellStateResponse)
async def api_session_state(session_id: str):
    return _state_response(_require_session(session_id).shell)


@router.post("/sessions/{session_id}/generate", response_model=ShellStateResponse)
def api_generate(session_id: str, body: GenerateRequest):
    """Start generation. Returns immediately; follow GET .../stream for the outcome."""
    shell = _require_session(session_id).shell
    if not body.prompt.strip():
        raise HTTPException(400, "Prompt must not be empty")
    if not shell.begin(body.prompt):
        raise HTTPException(409, "A generation request is already in progress")
    _executor.submit(_run_generation, shell, body.prompt)
    return _state_response(shell)


@router.get("/sessions/{session_id}/stream")
async def api_session_stream(session_id: str):
    """SSE stream of state snapshots; ends once the shell is no longer loading."""
    shell = _require_session(session_id).shell

    async def event_generator() -> AsyncGenerator[dict[str, str], None]:
        while True:
            snapshot = _state_response(shell)
            yield {"event": "state", "data": json.dumps(snapshot.model_dump())}
            if not isinstance(shell.state, LoadingState):
                break
            await asyncio.sleep(STREAM_POLL_INTERVAL)

    return EventSourceResponse(event_generator())


@router.post("/sessions/{session_id}/copy", response_model=CopyResponse)
async def api_copy(session_id: str, body: CopyRequest | None = None):
    """Mark the raw result as copied once the page has written it to the clipboard.

    A failed browser write (``ok: false``) is logged and leaves ``copied`` false.
    ``reset_seconds`` is how long the page should show the copied indicator.
    """
    session = _require_session(session_id)
    report = body or CopyRequest()
    session.clipboard.report(report.ok, report.error)
    copied = session.shell.copy()
    return CopyResponse(
        copied=copied,
        text=session.clipboard.last_text if copied else "",
        reset_seconds=config.COPY_RESET_SECONDS,
    )
