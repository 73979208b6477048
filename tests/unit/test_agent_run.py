"""Unit tests for the agent conversation engine."""

import pytest
from pydantic import BaseModel

from shadow_agents.agents import DEFAULT_MAX_TURNS, Agent, AgentConfig
from shadow_agents.errors import TransportError, TurnLimitExceeded
from shadow_agents.sessions import TextPart, ToolCallPart, ToolResultPart
from shadow_agents.tools import ToolBuilder


class AddArgs(BaseModel):
    a: int
    b: int


def add_tool(calls: list | None = None):
    def add(args: AddArgs) -> dict:
        if calls is not None:
            calls.append((args.a, args.b))
        return {"sum": args.a + args.b}

    return ToolBuilder("add").describe("Add two integers").parameters(AddArgs).handler(add).build()


class TestAgentConstruction:
    """Tests for Agent construction."""

    def test_defaults(self, make_binding):
        agent = Agent("Helper", make_binding())

        assert agent.max_turns == DEFAULT_MAX_TURNS
        assert agent.tool_specs == []

    def test_blank_name(self, make_binding):
        with pytest.raises(ValueError):
            Agent("  ", make_binding())

    def test_invalid_max_turns(self, make_binding):
        with pytest.raises(ValueError):
            Agent("Helper", make_binding(), max_turns=0)

    def test_from_config(self, make_binding):
        config = AgentConfig(
            name="Helper", description="Helps", system_prompt="Be nice", max_turns=3
        )

        agent = Agent.from_config(config, make_binding(), tools=[add_tool()])

        assert agent.name == "Helper"
        assert agent.description == "Helps"
        assert agent.system_prompt == "Be nice"
        assert agent.max_turns == 3
        assert agent.registry.names() == ["add"]

    def test_register_tools_is_chainable(self, make_binding):
        agent = Agent("Helper", make_binding())

        assert agent.register_tools(add_tool()) is agent
        assert [spec.name for spec in agent.tool_specs] == ["add"]


class TestAgentRun:
    """Tests for Agent.run()."""

    @pytest.mark.asyncio
    async def test_text_reply_ends_run(self, make_binding):
        """Test that a reply without tool calls is the final answer."""
        binding = make_binding([TextPart("a"), TextPart("b")])
        agent = Agent("Helper", binding)

        assert await agent.run("hello") == "ab"
        assert binding.sent == [[TextPart("hello")]]

    @pytest.mark.asyncio
    async def test_empty_reply_gives_empty_string(self, make_binding):
        agent = Agent("Helper", make_binding([]))

        assert await agent.run("hello") == ""

    @pytest.mark.asyncio
    async def test_session_receives_system_prompt_and_tools(self, make_binding):
        binding = make_binding([TextPart("done")])
        agent = Agent("Helper", binding, system_prompt="Be brief", tools=[add_tool()])

        await agent.run("hello")

        session = binding.sessions[0]
        assert session.system_prompt == "Be brief"
        assert [spec.name for spec in session.tools] == ["add"]

    @pytest.mark.asyncio
    async def test_each_run_opens_a_new_session(self, make_binding):
        binding = make_binding([TextPart("one")], [TextPart("two")])
        agent = Agent("Helper", binding)

        assert await agent.run("first") == "one"
        assert await agent.run("second") == "two"
        assert len(binding.sessions) == 2

    @pytest.mark.asyncio
    async def test_tool_round_trip(self, make_binding):
        """Test that a tool call is dispatched and its result sent back."""
        calls = []
        binding = make_binding(
            [ToolCallPart("add", {"a": 2, "b": 3})],
            [TextPart("The sum is 5")],
        )
        agent = Agent("Helper", binding, tools=[add_tool(calls)])

        result = await agent.run("What is 2 + 3?")

        assert result == "The sum is 5"
        assert calls == [(2, 3)]
        assert binding.sent[1] == [ToolResultPart("add", {"sum": 5})]

    @pytest.mark.asyncio
    async def test_json_text_arguments(self, make_binding):
        binding = make_binding(
            [ToolCallPart("add", '{"a": 1, "b": 1}')],
            [TextPart("2")],
        )
        agent = Agent("Helper", binding, tools=[add_tool()])

        assert await agent.run("1 + 1") == "2"
        assert binding.sent[1] == [ToolResultPart("add", {"sum": 2})]

    @pytest.mark.asyncio
    async def test_only_first_tool_call_is_dispatched(self, make_binding):
        """Test that extra tool calls in one reply are ignored."""
        calls = []
        binding = make_binding(
            [
                TextPart("Let me add"),
                ToolCallPart("add", {"a": 1, "b": 2}),
                ToolCallPart("add", {"a": 10, "b": 20}),
            ],
            [TextPart("3")],
        )
        agent = Agent("Helper", binding, tools=[add_tool(calls)])

        assert await agent.run("add") == "3"
        assert calls == [(1, 2)]
        assert binding.sent[1] == [ToolResultPart("add", {"sum": 3})]

    @pytest.mark.asyncio
    async def test_unknown_tool_is_reported_to_model(self, make_binding):
        """Test that an unknown tool becomes an error result, not a failure."""
        binding = make_binding(
            [ToolCallPart("subtract", {"a": 1, "b": 2})],
            [TextPart("I cannot subtract")],
        )
        agent = Agent("Helper", binding, tools=[add_tool()])

        assert await agent.run("1 - 2") == "I cannot subtract"

        (result,) = binding.sent[1]
        assert isinstance(result, ToolResultPart)
        assert result.is_error
        assert result.result == {"error": "Tool 'subtract' not found"}

    @pytest.mark.asyncio
    async def test_bad_arguments_are_reported_to_model(self, make_binding):
        binding = make_binding(
            [ToolCallPart("add", {"a": "one"})],
            [ToolCallPart("add", {"a": 1, "b": 1})],
            [TextPart("2")],
        )
        agent = Agent("Helper", binding, tools=[add_tool()])

        assert await agent.run("1 + 1") == "2"
        assert binding.sent[1][0].is_error
        assert binding.sent[2] == [ToolResultPart("add", {"sum": 2})]

    @pytest.mark.asyncio
    async def test_failing_tool_is_reported_to_model(self, make_binding):
        def explode(args):
            raise RuntimeError("disk on fire")

        binding = make_binding([ToolCallPart("explode", {})], [TextPart("sorry")])
        agent = Agent("Helper", binding, tools=[ToolBuilder("explode").handler(explode).build()])

        assert await agent.run("go") == "sorry"
        assert "disk on fire" in binding.sent[1][0].result["error"]

    @pytest.mark.asyncio
    async def test_tool_result_in_reply_is_ignored(self, make_binding):
        binding = make_binding([ToolResultPart("add", {"sum": 1}), TextPart("ok")])
        agent = Agent("Helper", binding)

        assert await agent.run("hi") == "ok"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, make_binding):
        """Test that a failing session aborts the run without dispatching."""
        calls = []
        binding = make_binding(
            [ToolCallPart("add", {"a": 1, "b": 2})],
            TransportError("connection reset"),
        )
        agent = Agent("Helper", binding, tools=[add_tool(calls)])

        with pytest.raises(TransportError, match="connection reset"):
            await agent.run("add")

        assert calls == [(1, 2)]
        assert len(binding.sent) == 2

    @pytest.mark.asyncio
    async def test_first_send_failure_dispatches_nothing(self, make_binding):
        calls = []
        binding = make_binding(TransportError("offline"))
        agent = Agent("Helper", binding, tools=[add_tool(calls)])

        with pytest.raises(TransportError):
            await agent.run("add")

        assert calls == []

    @pytest.mark.asyncio
    async def test_other_session_errors_become_transport_errors(self, make_binding):
        binding = make_binding(ConnectionError("refused"))
        agent = Agent("Helper", binding)

        with pytest.raises(TransportError, match="refused") as exc_info:
            await agent.run("hi")

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_turn_limit(self, make_binding):
        """Test that a model that never stops calling tools is cut off."""
        calls = []
        binding = make_binding(
            *[[ToolCallPart("add", {"a": i, "b": i})] for i in range(5)]
        )
        agent = Agent("Looper", binding, max_turns=3, tools=[add_tool(calls)])

        with pytest.raises(TurnLimitExceeded) as exc_info:
            await agent.run("loop")

        assert exc_info.value.max_turns == 3
        assert exc_info.value.agent_name == "Looper"
        assert len(binding.sent) == 3
        # The tool call pending at the limit is not dispatched
        assert calls == [(0, 0), (1, 1)]

    @pytest.mark.asyncio
    async def test_answer_on_last_turn_is_accepted(self, make_binding):
        binding = make_binding(
            [ToolCallPart("add", {"a": 1, "b": 1})],
            [TextPart("2")],
        )
        agent = Agent("Helper", binding, max_turns=2, tools=[add_tool()])

        assert await agent.run("1 + 1") == "2"
