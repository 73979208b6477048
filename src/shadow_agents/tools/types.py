"""Tool definitions and the tool builder.

A ``Tool`` pairs an immutable ``ToolSpec`` (what the model is told) with a
handler (what runs when the model calls it) and an argument decoder that
turns the raw argument mapping into the value the handler receives.

Tools are declared explicitly, never by inspecting the handler signature:

    >>> class WeatherArgs(BaseModel):
    ...     location: str = Field(description="City name")
    >>> tool = (
    ...     ToolBuilder("get_weather")
    ...     .describe("Get the current weather")
    ...     .parameters(WeatherArgs)
    ...     .handler(fetch_weather)
    ...     .build()
    ... )
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shadow_agents.errors import (
    ArgumentDecodeError,
    InvalidArgument,
    ToolExecutionError,
)
from shadow_agents.tools.schema import (
    Schema,
    generate_schema,
    ignored_argument_names,
    validate_arguments,
)

logger = logging.getLogger(__name__)

# Handlers may be plain functions or coroutine functions.
ToolHandler = Callable[[Any], Any]
ArgumentDecoder = Callable[[dict[str, Any]], Any]


class ToolSpec(BaseModel):
    """Model-facing description of a tool.

    Attributes:
        name: Unique, stable identifier the model uses to call the tool
        description: What the tool does, in natural language
        parameters: Object schema describing the accepted arguments
    """

    name: str = Field(min_length=1)
    description: str = ""
    parameters: Schema = Field(default_factory=Schema.object)

    model_config = ConfigDict(frozen=True)

    def to_function_definition(self) -> dict[str, Any]:
        """Render the spec as a JSON function declaration."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters.to_json_schema(),
        }


def _normalize_result(result: Any) -> dict[str, Any]:
    """Coerce a handler's return value into a result mapping."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    if isinstance(result, dict):
        return result
    return {"result": result}


def _model_decoder(model_cls: type[BaseModel]) -> ArgumentDecoder:
    # Fields hidden from the model keep their defaults
    ignored = ignored_argument_names(model_cls)

    def decode(arguments: dict[str, Any]) -> BaseModel:
        visible = {key: value for key, value in arguments.items() if key not in ignored}
        try:
            return model_cls.model_validate(visible)
        except ValidationError as e:
            raise ArgumentDecodeError(
                f"Invalid arguments for {model_cls.__name__}: {e}"
            ) from e

    return decode


def _schema_decoder(schema: Schema) -> ArgumentDecoder:
    def decode(arguments: dict[str, Any]) -> dict[str, Any]:
        return validate_arguments(schema, arguments)

    return decode


@dataclass(frozen=True)
class Tool:
    """A registered tool: spec, handler and argument decoder."""

    spec: ToolSpec
    handler: ToolHandler
    decoder: ArgumentDecoder

    @property
    def name(self) -> str:
        return self.spec.name

    @classmethod
    def from_model(
        cls,
        name: str,
        description: str,
        params_model: type[BaseModel],
        handler: ToolHandler,
    ) -> "Tool":
        """Create a tool whose arguments are described by a pydantic model.

        The handler receives a validated ``params_model`` instance.

        Raises:
            UnsupportedFieldType: If the model has a non-primitive field
            IgnoredFieldRequired: If a field left out of the schema has no default
        """
        spec = ToolSpec(
            name=name,
            description=description,
            parameters=generate_schema(params_model),
        )
        return cls(spec=spec, handler=handler, decoder=_model_decoder(params_model))

    @classmethod
    def from_schema(
        cls,
        name: str,
        description: str,
        schema: Schema,
        handler: ToolHandler,
    ) -> "Tool":
        """Create a tool from a hand-built object schema.

        The handler receives the validated argument dict.
        """
        spec = ToolSpec(name=name, description=description, parameters=schema)
        return cls(spec=spec, handler=handler, decoder=_schema_decoder(schema))

    def decode(self, arguments: dict[str, Any]) -> Any:
        """Decode raw arguments into the value passed to the handler.

        Raises:
            ArgumentDecodeError: If the arguments do not fit the schema
        """
        return self.decoder(arguments)

    async def execute(self, decoded: Any) -> dict[str, Any]:
        """Run the handler on decoded arguments.

        Args:
            decoded: Output of ``decode``

        Returns:
            dict: The handler result; non-mapping values are wrapped as
                  ``{"result": value}``

        Raises:
            ToolExecutionError: If the handler raises
            InvalidArgument: If the handler rejects an argument
        """
        try:
            result = self.handler(decoded)
            if inspect.isawaitable(result):
                result = await result
        except (ToolExecutionError, InvalidArgument):
            raise
        except Exception as e:
            logger.warning(f"Tool '{self.name}' raised {type(e).__name__}: {e}")
            raise ToolExecutionError(f"Tool '{self.name}' failed: {e}") from e

        return _normalize_result(result)


class ToolBuilder:
    """Fluent builder for ``Tool`` instances.

    Either ``parameters`` (a pydantic model or a hand-built ``Schema``) may
    be omitted, in which case the tool takes no arguments; ``handler`` is
    mandatory.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._description = ""
        self._parameters: type[BaseModel] | Schema | None = None
        self._handler: ToolHandler | None = None

    def named(self, name: str) -> "ToolBuilder":
        self._name = name
        return self

    def describe(self, description: str) -> "ToolBuilder":
        self._description = description
        return self

    def parameters(self, parameters: type[BaseModel] | Schema) -> "ToolBuilder":
        self._parameters = parameters
        return self

    def handler(self, handler: ToolHandler) -> "ToolBuilder":
        self._handler = handler
        return self

    def build(self) -> Tool:
        """Build the tool.

        Raises:
            ValueError: If no handler was set
            UnsupportedFieldType: If a parameter model field is not primitive
            IgnoredFieldRequired: If a field left out of the schema has no default
        """
        if self._handler is None:
            raise ValueError(f"Tool '{self._name}' has no handler")

        if isinstance(self._parameters, Schema):
            return Tool.from_schema(
                self._name, self._description, self._parameters, self._handler
            )
        if self._parameters is None:
            return Tool.from_schema(
                self._name, self._description, Schema.object(), self._handler
            )
        return Tool.from_model(
            self._name, self._description, self._parameters, self._handler
        )
