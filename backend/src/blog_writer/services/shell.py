"""Interaction shell: prompt -> generation -> rendered result, plus copy.

One shell per browser session. Its display state is exactly one of
idle, loading, error or result. At most one generation is in flight; a new
request while loading is refused. There is no timeout: if the generation
call never returns, the shell stays loading.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, ClassVar, Union

from .. import config
from ..errors import ClipboardFailure
from .llm_blog_writer import generate_blog_post
from .markdown_parser import render_markdown
from .nodes import ContentNode, nodes_to_dicts

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

Generator = Callable[[str], Awaitable[str]]
ClipboardWriter = Callable[[str], None]


@dataclass(frozen=True)
class IdleState:
    kind: ClassVar[str] = "idle"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class LoadingState:
    prompt: str

    kind: ClassVar[str] = "loading"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "prompt": self.prompt}


@dataclass(frozen=True)
class ErrorState:
    message: str

    kind: ClassVar[str] = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class ResultState:
    """Raw generated text and its rendered nodes."""

    content: str
    nodes: tuple[ContentNode, ...]

    kind: ClassVar[str] = "result"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "content": self.content,
            "nodes": nodes_to_dicts(list(self.nodes)),
        }


ShellState = Union[IdleState, LoadingState, ErrorState, ResultState]


class ClipboardRelay:
    """Clipboard writer for the web app.

    The browser does the actual write and reports the outcome with
    ``report`` before the shell copies; a failed write raises
    ``ClipboardFailure`` so the copy is not marked as done.
    """

    def __init__(self) -> None:
        self.last_text = ""
        self._ok = True
        self._error = ""

    def report(self, ok: bool, error: str = "") -> None:
        self._ok = ok
        self._error = error

    def __call__(self, text: str) -> None:
        if not self._ok:
            raise ClipboardFailure(self._error or "browser clipboard write failed")
        self.last_text = text


class InteractionShell:
    def __init__(
        self,
        generate: Generator | None = None,
        clipboard: ClipboardWriter | None = None,
        *,
        copy_reset_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._generate = generate or generate_blog_post
        self._clipboard = clipboard or ClipboardRelay()
        self._copy_reset_seconds = (
            config.COPY_RESET_SECONDS if copy_reset_seconds is None else copy_reset_seconds
        )
        self._clock = clock
        self._lock = threading.Lock()
        self._state: ShellState = IdleState()
        self._copied_until = 0.0

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def copied(self) -> bool:
        """True for a fixed delay after a successful copy."""
        return self._clock() < self._copied_until

    def begin(self, prompt: str) -> bool:
        """Enter the loading state. Returns False if the request is suppressed."""
        if not prompt.strip():
            return False
        with self._lock:
            if isinstance(self._state, LoadingState):
                return False
            self._state = LoadingState(prompt=prompt)
            self._copied_until = 0.0
        return True

    async def complete(self, prompt: str) -> ShellState:
        """Run the generation call for a request accepted by ``begin``."""
        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.warning("Generation failed: %s", e)
            self._state = ErrorState(message=str(e) or UNKNOWN_ERROR_MESSAGE)
        else:
            self._state = ResultState(content=text, nodes=tuple(render_markdown(text)))
        return self._state

    async def submit(self, prompt: str) -> bool:
        if not self.begin(prompt):
            return False
        await self.complete(prompt)
        return True

    def copy(self) -> bool:
        """Copy the raw result text. Failures are logged and reported as False."""
        state = self._state
        if not isinstance(state, ResultState) or not state.content:
            return False
        try:
            self._clipboard(state.content)
        except Exception as e:
            failure = e if isinstance(e, ClipboardFailure) else ClipboardFailure(str(e))
            logger.warning("Failed to copy text: %s", failure)
            return False
        # Copying again restarts the delay.
        self._copied_until = self._clock() + self._copy_reset_seconds
        return True


@dataclass
class Session:
    session_id: str
    shell: InteractionShell
    clipboard: ClipboardRelay = field(repr=False, default_factory=ClipboardRelay)
    last_seen: float = field(default_factory=time.monotonic)


# In-memory session store
_session_store: dict[str, Session] = {}
_store_lock = threading.Lock()


def evict_idle_sessions(now: float | None = None, ttl: float | None = None) -> int:
    """Drop sessions unused for longer than ``ttl`` seconds. Loading sessions stay."""
    now = time.monotonic() if now is None else now
    ttl = config.SESSION_TTL_SECONDS if ttl is None else ttl
    with _store_lock:
        stale = [
            sid
            for sid, s in _session_store.items()
            if now - s.last_seen > ttl and not isinstance(s.shell.state, LoadingState)
        ]
        for sid in stale:
            del _session_store[sid]
    if stale:
        logger.info("Evicted %d idle session(s)", len(stale))
    return len(stale)


def create_session(generate: Generator | None = None) -> Session:
    evict_idle_sessions()
    session_id = uuid.uuid4().hex
    relay = ClipboardRelay()
    session = Session(
        session_id=session_id,
        shell=InteractionShell(generate=generate, clipboard=relay),
        clipboard=relay,
    )
    with _store_lock:
        _session_store[session_id] = session
    return session


def get_session(session_id: str) -> Session | None:
    session = _session_store.get(session_id)
    if session is not None:
        session.last_seen = time.monotonic()
    return session
