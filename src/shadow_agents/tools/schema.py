"""Parameter schemas for tools.

``Schema`` is the structural description of a tool's arguments that is
advertised to the model. Schemas are either built by hand with the
``Schema.object`` / ``Schema.string`` / ... constructors, or generated from a
pydantic model with ``generate_schema``.
"""

import inspect
import logging
import types
from enum import Enum
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.fields import FieldInfo

from shadow_agents.errors import (
    ArgumentDecodeError,
    IgnoredFieldRequired,
    UnsupportedFieldType,
)

logger = logging.getLogger(__name__)

# Wire name that marks a field as not part of the tool interface.
IGNORED_WIRE_NAME = "-"


class SchemaKind(str, Enum):
    """Kinds of values a schema can describe."""

    OBJECT = "object"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


_PRIMITIVE_KINDS: dict[Any, SchemaKind] = {
    str: SchemaKind.STRING,
    int: SchemaKind.INTEGER,
    float: SchemaKind.NUMBER,
    bool: SchemaKind.BOOLEAN,
}


class Schema(BaseModel):
    """Recursive description of a value expected by a tool.

    Attributes:
        kind: The value kind
        properties: Named sub-schemas in declaration order (objects only)
        required: Names of properties that must be present (objects only)
        description: Optional human-readable description
    """

    kind: SchemaKind
    properties: dict[str, "Schema"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    description: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_structure(self) -> "Schema":
        if self.kind is not SchemaKind.OBJECT and (self.properties or self.required):
            raise ValueError(f"{self.kind.value} schemas cannot declare properties")
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"Required properties are not declared: {unknown}")
        return self

    # --- Constructors for hand-built schemas ---

    @classmethod
    def object(
        cls,
        properties: dict[str, "Schema"] | None = None,
        required: list[str] | None = None,
        description: str | None = None,
    ) -> "Schema":
        return cls(
            kind=SchemaKind.OBJECT,
            properties=properties or {},
            required=required or [],
            description=description,
        )

    @classmethod
    def string(cls, description: str | None = None) -> "Schema":
        return cls(kind=SchemaKind.STRING, description=description)

    @classmethod
    def integer(cls, description: str | None = None) -> "Schema":
        return cls(kind=SchemaKind.INTEGER, description=description)

    @classmethod
    def number(cls, description: str | None = None) -> "Schema":
        return cls(kind=SchemaKind.NUMBER, description=description)

    @classmethod
    def boolean(cls, description: str | None = None) -> "Schema":
        return cls(kind=SchemaKind.BOOLEAN, description=description)

    def to_json_schema(self) -> dict[str, Any]:
        """Render the schema as a JSON Schema document.

        Returns:
            dict: JSON Schema with ``type``, and for objects ``properties``
                  and ``required`` (property order is preserved)
        """
        document: dict[str, Any] = {"type": self.kind.value}
        if self.description:
            document["description"] = self.description
        if self.kind is SchemaKind.OBJECT:
            document["properties"] = {
                name: prop.to_json_schema() for name, prop in self.properties.items()
            }
            document["required"] = list(self.required)
        return document


def _unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from ``Optional[X]`` / ``X | None`` annotations."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_ignored(field: FieldInfo, wire_name: str) -> bool:
    return field.exclude is True or wire_name == IGNORED_WIRE_NAME


def ignored_argument_names(model_cls: type[BaseModel]) -> set[str]:
    """Argument keys that would address fields left out of the schema.

    Both the alias and the field name of an ignored field are returned,
    unless the key is also the wire name of an advertised field.
    """
    advertised: set[str] = set()
    ignored: set[str] = set()
    for field_name, field in model_cls.model_fields.items():
        wire_name = field.alias or field_name
        if _is_ignored(field, wire_name):
            ignored.update((wire_name, field_name))
        else:
            advertised.add(wire_name)
    return ignored - advertised


def generate_schema(
    model_cls: type[BaseModel], description: str | None = None
) -> Schema:
    """Derive an object schema from a pydantic model's fields.

    Each field becomes one property keyed by its wire name (the field alias
    if set, otherwise the field name). A field is required unless it has a
    default. Fields declared with ``Field(exclude=True)`` or with the alias
    ``"-"`` are left out; they must have a default, since the model never
    sends them.

    Args:
        model_cls: The pydantic model describing the arguments
        description: Schema description; defaults to the model docstring

    Returns:
        Schema: An object schema whose properties follow field declaration order

    Raises:
        UnsupportedFieldType: If a field is not a str, int, float or bool
        IgnoredFieldRequired: If an ignored field has no default
    """
    properties: dict[str, Schema] = {}
    required: list[str] = []

    for field_name, field in model_cls.model_fields.items():
        wire_name = field.alias or field_name
        if _is_ignored(field, wire_name):
            if field.is_required():
                raise IgnoredFieldRequired(model_cls.__name__, field_name)
            logger.debug(f"Skipping ignored field {model_cls.__name__}.{field_name}")
            continue

        annotation = _unwrap_optional(field.annotation)
        kind = _PRIMITIVE_KINDS.get(annotation)
        if kind is None:
            raise UnsupportedFieldType(model_cls.__name__, field_name, field.annotation)

        properties[wire_name] = Schema(kind=kind, description=field.description)
        if field.is_required():
            required.append(wire_name)

    if description is None and model_cls.__doc__:
        description = inspect.cleandoc(model_cls.__doc__)

    return Schema.object(properties=properties, required=required, description=description)


def _coerce_value(path: str, schema: Schema, value: Any) -> Any:
    """Check a decoded value against a schema, returning the accepted value."""
    if schema.kind is SchemaKind.OBJECT:
        if not isinstance(value, dict):
            raise ArgumentDecodeError(f"'{path}' must be an object")
        return validate_arguments(schema, value, path=path)

    if schema.kind is SchemaKind.STRING:
        if isinstance(value, str):
            return value
    elif schema.kind is SchemaKind.BOOLEAN:
        if isinstance(value, bool):
            return value
    elif schema.kind is SchemaKind.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # Providers occasionally send whole numbers as floats
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif schema.kind is SchemaKind.NUMBER:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value

    raise ArgumentDecodeError(
        f"'{path}' must be of type {schema.kind.value}, got {type(value).__name__}"
    )


def validate_arguments(
    schema: Schema, arguments: dict[str, Any], path: str = ""
) -> dict[str, Any]:
    """Validate decoded tool arguments against a hand-built object schema.

    Undeclared arguments are dropped and ``None`` is treated as absent.

    Args:
        schema: The object schema to validate against
        arguments: Decoded argument mapping
        path: Dotted prefix used in error messages for nested objects

    Returns:
        dict: The accepted arguments, in schema property order

    Raises:
        ArgumentDecodeError: If a required argument is missing or an
                             argument has the wrong type
    """
    accepted: dict[str, Any] = {}
    for name, prop in schema.properties.items():
        prop_path = f"{path}.{name}" if path else name
        value = arguments.get(name)
        if value is None:
            if name in schema.required:
                raise ArgumentDecodeError(f"Missing required argument '{prop_path}'")
            continue
        accepted[name] = _coerce_value(prop_path, prop, value)

    extra = [name for name in arguments if name not in schema.properties]
    if extra:
        logger.debug(f"Dropping undeclared arguments: {extra}")

    return accepted
