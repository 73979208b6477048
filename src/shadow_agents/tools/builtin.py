"""Built-in tools that any agent can register."""

import re
from typing import Callable

from pydantic import BaseModel, Field

from shadow_agents.errors import InvalidArgument
from shadow_agents.tools.types import Tool, ToolBuilder


class MathArgs(BaseModel):
    """Arguments for a binary arithmetic operation."""

    a: float = Field(description="Left operand")
    b: float = Field(description="Right operand")
    operation: str = Field(
        description="One of: add, subtract, multiply, divide, power"
    )


class MathResult(BaseModel):
    expression: str
    value: float


_OPERATORS: dict[str, tuple[str, Callable[[float, float], float]]] = {
    "add": ("+", lambda a, b: a + b),
    "subtract": ("-", lambda a, b: a - b),
    "multiply": ("*", lambda a, b: a * b),
    "divide": ("/", lambda a, b: a / b),
    "power": ("**", lambda a, b: a**b),
}


def calculate(args: MathArgs) -> MathResult:
    operation = args.operation.strip().lower()
    if operation not in _OPERATORS:
        raise InvalidArgument(
            f"Unknown operation '{args.operation}'; expected one of "
            f"{', '.join(_OPERATORS)}"
        )
    if operation == "divide" and args.b == 0:
        raise InvalidArgument("Division by zero")

    symbol, func = _OPERATORS[operation]
    value = func(args.a, args.b)
    return MathResult(expression=f"{args.a:g} {symbol} {args.b:g}", value=value)


def math_tool() -> Tool:
    return (
        ToolBuilder("Math")
        .describe("Evaluate a single arithmetic operation on two numbers.")
        .parameters(MathArgs)
        .handler(calculate)
        .build()
    )


class FormatterArgs(BaseModel):
    """Arguments for the output formatter."""

    text: str = Field(description="Text to clean up")
    max_blank_lines: int = Field(
        default=1, description="Maximum consecutive blank lines to keep"
    )


def format_text(args: FormatterArgs) -> dict[str, str]:
    if args.max_blank_lines < 0:
        raise InvalidArgument("max_blank_lines must not be negative")

    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in args.text.splitlines()]

    formatted: list[str] = []
    blank_run = 0
    for line in lines:
        if not line:
            blank_run += 1
            if blank_run > args.max_blank_lines or not formatted:
                continue
        else:
            blank_run = 0
        formatted.append(line)

    while formatted and not formatted[-1]:
        formatted.pop()

    return {"text": "\n".join(formatted)}


def formatter_tool() -> Tool:
    return (
        ToolBuilder("Formatter")
        .describe("Standardize and polish final output.")
        .parameters(FormatterArgs)
        .handler(format_text)
        .build()
    )


class TodoArgs(BaseModel):
    """Arguments for the todo verifier."""

    required_steps: str = Field(description="Required steps, one per line")
    completed_steps: str = Field(
        default="", description="Steps already completed, one per line"
    )


def _split_steps(text: str) -> list[str]:
    steps = []
    for line in text.splitlines():
        step = line.strip().lstrip("-*").strip()
        if step:
            steps.append(step)
    return steps


def verify_todos(args: TodoArgs) -> dict[str, object]:
    required = _split_steps(args.required_steps)
    if not required:
        raise InvalidArgument("required_steps must list at least one step")

    completed = {step.casefold() for step in _split_steps(args.completed_steps)}
    missing = [step for step in required if step.casefold() not in completed]
    return {"complete": not missing, "missing": missing}


def todo_verifier_tool() -> Tool:
    return (
        ToolBuilder("TodoVerifier")
        .describe(
            "Check that all required steps are complete and list missing ones."
        )
        .parameters(TodoArgs)
        .handler(verify_todos)
        .build()
    )


def builtin_tools() -> list[Tool]:
    """Return fresh instances of every built-in tool."""
    return [math_tool(), formatter_tool(), todo_verifier_tool()]
