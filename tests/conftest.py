"""Pytest configuration and shared fixtures for shadow-agents tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup, and scripted model
bindings that replay canned replies instead of calling a real model.
"""

from typing import Any, Callable, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shadow_agents import create_app
from shadow_agents.config import ShadowAgentsSettings
from shadow_agents.sessions import ContentPart
from shadow_agents.tools import ToolSpec

# A scripted reply is a list of parts, an exception to raise, or a callable
# computing the parts from the outgoing message.
Reply = (
    list[ContentPart]
    | BaseException
    | Callable[[list[ContentPart]], list[ContentPart]]
)


class ScriptedSession:
    """Model session that returns the binding's scripted replies in order."""

    def __init__(
        self,
        binding: "ScriptedBinding",
        system_prompt: str | None,
        tools: Sequence[ToolSpec],
    ) -> None:
        self.binding = binding
        self.system_prompt = system_prompt
        self.tools = list(tools)
        self.sent: list[list[ContentPart]] = []

    async def send(self, parts: Sequence[ContentPart]) -> list[ContentPart]:
        outgoing = list(parts)
        self.sent.append(outgoing)
        if not self.binding.replies:
            raise AssertionError(f"Unexpected message to the model: {outgoing}")

        reply = self.binding.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return list(reply(outgoing))
        return list(reply)


class ScriptedBinding:
    """Model binding whose sessions replay a fixed list of replies."""

    def __init__(self, replies: list[Reply], model_name: str = "scripted-model") -> None:
        self.replies = list(replies)
        self.model_name = model_name
        self.sessions: list[ScriptedSession] = []

    def start_session(
        self, system_prompt: str | None, tools: Sequence[ToolSpec]
    ) -> ScriptedSession:
        session = ScriptedSession(self, system_prompt, tools)
        self.sessions.append(session)
        return session

    @property
    def sent(self) -> list[list[ContentPart]]:
        """All messages sent across every session, in order."""
        return [message for session in self.sessions for message in session.sent]


@pytest.fixture
def make_binding() -> Callable[..., ScriptedBinding]:
    """Factory fixture for scripted model bindings.

    Usage: ``binding = make_binding([TextPart("hi")], error, ...)``
    """

    def _make(*replies: Any, model_name: str = "scripted-model") -> ScriptedBinding:
        return ScriptedBinding(list(replies), model_name=model_name)

    return _make


@pytest.fixture
def test_settings():
    """Create test settings.

    Returns:
        ShadowAgentsSettings: Settings instance configured for testing.
    """
    return ShadowAgentsSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.2:latest",
        max_turns=5,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
