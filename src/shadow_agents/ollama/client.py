"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is owned by whoever creates
it (the server lifespan, or an ``async with`` block) and must be closed by
that owner; there is no shared global instance.
"""

import logging
from typing import Any

import ollama

logger = logging.getLogger(__name__)


def _to_dict(response: Any) -> dict[str, Any]:
    """Convert an ollama response object to a plain dict."""
    if hasattr(response, "model_dump"):
        return response.model_dump()
    if isinstance(response, dict):
        return response
    # Fallback: convert to dict using vars()
    return vars(response)


class OllamaClient:
    """Async client for interacting with the Ollama API.

    This client wraps ollama.AsyncClient and provides the calls the agent
    layer needs: a connectivity check and non-streaming chat completions
    with tool declarations.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str, timeout: float | None = None) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
            timeout: Optional request timeout in seconds
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host, timeout=timeout)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            # Try to list models as a connectivity check
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Request a single, complete chat response from Ollama.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            tools: Optional function tool declarations:
                   [{"type": "function", "function": {...}}, ...]
            options: Optional model parameters (temperature, etc.)

        Returns:
            dict: The response. ``message`` holds ``role``, ``content`` and
                  optionally ``tool_calls``

        Raises:
            Exception: If the Ollama API request fails
        """
        try:
            logger.debug(
                f"Chat request to {model}: {len(messages)} messages, "
                f"{len(tools or [])} tools"
            )
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                options=options,
            )
            response_dict = _to_dict(response)
            logger.debug(
                f"Received response: done={response_dict.get('done')}, "
                f"eval_count={response_dict.get('eval_count')}"
            )
            return response_dict

        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client and release its HTTP connections."""
        # ollama.AsyncClient keeps its httpx.AsyncClient in ``_client``
        http_client = getattr(self._client, "_client", None)
        if http_client is not None and hasattr(http_client, "aclose"):
            await http_client.aclose()
        logger.debug("OllamaClient closed")
