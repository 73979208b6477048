"""Unit tests for the agent factories used by the server."""

import sys
import types

import pytest

from shadow_agents.agents import Agent
from shadow_agents.agents.factory import (
    build_agents,
    default_agents,
    load_agent_factory,
)
from shadow_agents.config import ShadowAgentsSettings


@pytest.fixture
def factory_module(monkeypatch):
    """Register an importable module holding custom agent factories."""
    module = types.ModuleType("custom_agents")

    def team(binding, settings):
        researcher = Agent("Researcher", binding, description="Finds facts")
        lead = Agent("Lead", binding, max_turns=settings.max_turns)
        lead.register_sub_agents(researcher)
        return [lead, researcher]

    def duplicates(binding, settings):
        return [Agent("Twin", binding), Agent("Twin", binding)]

    module.team = team
    module.duplicates = duplicates
    module.not_callable = 42
    monkeypatch.setitem(sys.modules, "custom_agents", module)
    return module


def test_default_agents(make_binding, test_settings):
    """Test that the default factory serves one assistant with built-in tools."""
    (assistant,) = default_agents(make_binding(), test_settings)

    assert assistant.name == "Assistant"
    assert assistant.system_prompt == test_settings.default_system_prompt
    assert assistant.max_turns == test_settings.max_turns
    assert assistant.registry.names() == ["Math", "Formatter", "TodoVerifier"]


def test_build_agents_default(make_binding, test_settings):
    agents = build_agents(make_binding(), test_settings)

    assert list(agents) == ["Assistant"]


def test_build_agents_custom_factory(make_binding, factory_module):
    settings = ShadowAgentsSettings(agents_factory="custom_agents:team", max_turns=4)

    agents = build_agents(make_binding(), settings)

    assert list(agents) == ["Lead", "Researcher"]
    assert agents["Lead"].max_turns == 4
    assert agents["Lead"].registry.names() == ["Researcher"]


def test_build_agents_duplicate_names(make_binding, factory_module):
    settings = ShadowAgentsSettings(agents_factory="custom_agents:duplicates")

    with pytest.raises(ValueError, match="Duplicate agent name"):
        build_agents(make_binding(), settings)


@pytest.mark.parametrize("path", ["custom_agents", "custom_agents:", ":team"])
def test_load_agent_factory_bad_path(path):
    with pytest.raises(ValueError, match="module:function"):
        load_agent_factory(path)


def test_load_agent_factory_not_callable(factory_module):
    with pytest.raises(ValueError, match="not callable"):
        load_agent_factory("custom_agents:not_callable")


def test_load_agent_factory_missing_module():
    with pytest.raises(ImportError):
        load_agent_factory("no_such_module_for_agents:factory")
