import pytest
from fastapi.testclient import TestClient


class InlineExecutor:
    """Run background tasks inline (deterministic tests)."""

    def submit(self, fn, *args, **kwargs):
        fn(*args, **kwargs)

        class _Dummy:
            def result(self):
                return None

        return _Dummy()


@pytest.fixture()
def client() -> TestClient:
    from blog_writer.main import app

    return TestClient(app)


@pytest.fixture()
def inline_executor(monkeypatch):
    from blog_writer.api import routes

    monkeypatch.setattr(routes, "_executor", InlineExecutor())


@pytest.fixture()
def fake_generate(monkeypatch):
    """Replace the OpenAI-backed generator; returns the list of prompts seen."""
    from blog_writer.services import shell

    prompts: list[str] = []
    reply = {"text": "## Title\n\nSome *italic* and **bold** text."}

    async def generate(prompt: str) -> str:
        prompts.append(prompt)
        if isinstance(reply["text"], Exception):
            raise reply["text"]
        return reply["text"]

    monkeypatch.setattr(shell, "generate_blog_post", generate)
    generate.prompts = prompts
    generate.reply = reply
    return generate


@pytest.fixture(autouse=True)
def _clear_in_memory_stores():
    # Ensure deterministic tests across runs.
    from blog_writer.services import shell

    shell._session_store.clear()
    yield
    shell._session_store.clear()
