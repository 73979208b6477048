"""Ollama client wrapper and model session adapter.

This package provides the async Ollama client and the binding that lets
agents hold conversations with Ollama models.
"""

from shadow_agents.ollama.client import OllamaClient
from shadow_agents.ollama.session import OllamaChatSession, OllamaModelBinding

__all__ = ["OllamaClient", "OllamaChatSession", "OllamaModelBinding"]
