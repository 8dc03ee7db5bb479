import asyncio
import logging

from blog_writer.errors import ClipboardFailure, GenerationFailure
from blog_writer.services.nodes import Heading, PlainText
from blog_writer.services.shell import (
    UNKNOWN_ERROR_MESSAGE,
    ClipboardRelay,
    ErrorState,
    IdleState,
    InteractionShell,
    LoadingState,
    ResultState,
    create_session,
    evict_idle_sessions,
    get_session,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _generator(text: str = "## Hello"):
    async def generate(prompt: str) -> str:
        return text

    return generate


def _failing(exc: Exception):
    async def generate(prompt: str) -> str:
        raise exc

    return generate


def test_starts_idle():
    assert isinstance(InteractionShell(generate=_generator()).state, IdleState)


def test_submit_renders_result():
    shell = InteractionShell(generate=_generator("## Hello"))
    assert asyncio.run(shell.submit("topic")) is True
    state = shell.state
    assert isinstance(state, ResultState)
    assert state.content == "## Hello"
    assert state.nodes == (Heading(level=2, children=(PlainText("Hello"),)),)


def test_blank_prompt_is_suppressed():
    shell = InteractionShell(generate=_generator())
    assert shell.begin("   ") is False
    assert asyncio.run(shell.submit("")) is False
    assert isinstance(shell.state, IdleState)


def test_second_request_suppressed_while_loading():
    shell = InteractionShell(generate=_generator())
    assert shell.begin("first") is True
    assert shell.begin("second") is False
    assert shell.state == LoadingState(prompt="first")

    asyncio.run(shell.complete("first"))
    assert isinstance(shell.state, ResultState)
    assert shell.begin("third") is True


def test_generation_failure_message_is_shown():
    shell = InteractionShell(generate=_failing(GenerationFailure("quota exceeded")))
    asyncio.run(shell.submit("topic"))
    assert shell.state == ErrorState(message="quota exceeded")


def test_generation_failure_without_message_uses_fallback():
    shell = InteractionShell(generate=_failing(RuntimeError()))
    asyncio.run(shell.submit("topic"))
    assert shell.state == ErrorState(message=UNKNOWN_ERROR_MESSAGE)


def test_new_request_clears_previous_result():
    shell = InteractionShell(generate=_generator())
    asyncio.run(shell.submit("one"))
    shell.begin("two")
    assert shell.state == LoadingState(prompt="two")


def test_copy_writes_raw_text_and_reverts():
    clock = FakeClock()
    relay = ClipboardRelay()
    shell = InteractionShell(
        generate=_generator("**raw** text"), clipboard=relay, copy_reset_seconds=2.0, clock=clock
    )
    asyncio.run(shell.submit("topic"))

    assert shell.copied is False
    assert shell.copy() is True
    assert relay.last_text == "**raw** text"
    assert shell.copied is True

    clock.now += 2.5
    assert shell.copied is False


def test_copy_again_restarts_delay():
    clock = FakeClock()
    shell = InteractionShell(generate=_generator(), copy_reset_seconds=2.0, clock=clock)
    asyncio.run(shell.submit("topic"))

    shell.copy()
    clock.now += 1.5
    shell.copy()
    clock.now += 1.5
    assert shell.copied is True
    clock.now += 1.0
    assert shell.copied is False


def test_copy_without_result_does_nothing():
    relay = ClipboardRelay()
    shell = InteractionShell(generate=_generator(), clipboard=relay)
    assert shell.copy() is False
    assert relay.last_text == ""


def test_clipboard_failure_is_logged_not_raised(caplog):
    def broken(text: str) -> None:
        raise ClipboardFailure("permission denied")

    shell = InteractionShell(generate=_generator(), clipboard=broken)
    asyncio.run(shell.submit("topic"))
    with caplog.at_level(logging.WARNING):
        assert shell.copy() is False
    assert shell.copied is False
    assert "Failed to copy text" in caplog.text
    assert isinstance(shell.state, ResultState)


def test_sessions_are_stored():
    session = create_session(generate=_generator())
    assert get_session(session.session_id) is session
    assert get_session("missing") is None


def test_relay_failure_report_blocks_copy(caplog):
    relay = ClipboardRelay()
    shell = InteractionShell(generate=_generator("text"), clipboard=relay)
    asyncio.run(shell.submit("topic"))

    relay.report(False, "NotAllowedError: denied")
    with caplog.at_level(logging.WARNING):
        assert shell.copy() is False
    assert shell.copied is False
    assert relay.last_text == ""
    assert "NotAllowedError: denied" in caplog.text

    relay.report(True)
    assert shell.copy() is True
    assert relay.last_text == "text"


def test_idle_sessions_are_evicted():
    old = create_session(generate=_generator())
    busy = create_session(generate=_generator())
    fresh = create_session(generate=_generator())
    old.last_seen = busy.last_seen = 0.0
    fresh.last_seen = 900.0
    busy.shell.begin("still running")

    assert evict_idle_sessions(now=1000.0, ttl=600.0) == 1
    assert get_session(old.session_id) is None
    assert get_session(busy.session_id) is busy
    assert get_session(fresh.session_id) is fresh


def test_get_session_keeps_session_alive():
    session = create_session(generate=_generator())
    session.last_seen = 0.0
    assert get_session(session.session_id) is session
    assert session.last_seen > 0.0
    assert evict_idle_sessions(now=session.last_seen + 1.0, ttl=600.0) == 0
