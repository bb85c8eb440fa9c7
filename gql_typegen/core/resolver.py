"""Resolution of scalar, enum and input object types.

Maps bare schema types to the Python annotation and conversion code used by
generated classes, registering enum and input object classes on first use.
"""

import logging
from enum import Enum

from graphql import (
    GraphQLEnumType,
    GraphQLInputObjectType,
    GraphQLNamedType,
    GraphQLSchema,
    GraphQLType,
    is_enum_type,
    is_input_object_type,
    is_interface_type,
    is_object_type,
    is_scalar_type,
    is_union_type,
)

from .errors import ReservedNameError, UnsupportedTypeKindError
from .expressions import render_serializer
from .ir import EnumClass, InputClass, TypedInput, TypedOutput, VariableDefinition
from .naming import safe_param_name, snake_case, type_class_name
from .registry import ClassRegistry
from .scalars import BUILTIN_CONVERTERS, ScalarRegistry, converter_reference
from .wrappers import build_input_expression, unwrap_type, wrap_signature

logger = logging.getLogger(__name__)

# Parameter names taken by the generated ``execute`` classmethod
OPERATION_RESERVED_NAMES = frozenset({"cls", "executor"})
# Parameter names taken by generated input object classes
INPUT_RESERVED_NAMES = frozenset({"self", "serialize"})
# Member names taken by the generated enum base class
ENUM_RESERVED_NAMES = frozenset({"serialize", "deserialize"})

# Default (signature, deserializer) of the built-in scalars
DEFAULT_OUTPUTS = {
    "Boolean": ("bool", "cast(bool, raw_value)"),
    "Int": ("int", "cast(int, raw_value)"),
    "Float": ("float", "float(raw_value)"),
    "String": ("str", "cast(str, raw_value)"),
    "ID": ("str", "cast(str, raw_value)"),
    "BigInt": ("int", "int(raw_value)"),
}

DEFAULT_INPUTS = {
    "Boolean": "bool",
    "Int": "int",
    "Float": "float",
    "String": "str",
    "ID": "str",
    "BigInt": "int",
}


class TypeKind(Enum):
    """Kinds of bare schema types the generator models."""
    SCALAR = "scalar"
    ENUM = "enum"
    OBJECT = "object"
    INTERFACE = "interface"
    UNION = "union"
    INPUT_OBJECT = "input_object"

    @property
    def is_composite(self) -> bool:
        return self in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)


def type_kind(graphql_type: GraphQLType) -> TypeKind:
    """Classify a bare schema type."""
    if is_scalar_type(graphql_type):
        return TypeKind.SCALAR
    if is_enum_type(graphql_type):
        return TypeKind.ENUM
    if is_object_type(graphql_type):
        return TypeKind.OBJECT
    if is_interface_type(graphql_type):
        return TypeKind.INTERFACE
    if is_union_type(graphql_type):
        return TypeKind.UNION
    if is_input_object_type(graphql_type):
        return TypeKind.INPUT_OBJECT
    raise UnsupportedTypeKindError(graphql_type)


def concrete_type_names(schema: GraphQLSchema, graphql_type: GraphQLNamedType) -> tuple[str, ...]:
    """Names of the object types a value of graphql_type can have at runtime."""
    kind = type_kind(graphql_type)
    if kind is TypeKind.OBJECT:
        return (graphql_type.name,)
    if kind in (TypeKind.INTERFACE, TypeKind.UNION):
        return tuple(t.name for t in schema.get_possible_types(graphql_type))
    raise UnsupportedTypeKindError(graphql_type, "a selection set")


class TypeResolver:
    """Resolves leaf and input types for one generation run.

    Enum and input object classes are registered in ``registry`` the first time
    they are needed. Imports the generated module needs for scalar converters
    collect in ``imports``.
    """

    def __init__(self, schema: GraphQLSchema, scalars: ScalarRegistry, registry: ClassRegistry):
        self.schema = schema
        self.scalars = scalars
        self.registry = registry
        self.imports: set[str] = set()
        self._enums: dict[str, str] = {}
        self._inputs: dict[str, str] = {}
        self._pending_inputs: set[str] = set()

    # =========================================================================
    # Output path
    # =========================================================================

    def output_for(self, graphql_type: GraphQLNamedType) -> TypedOutput:
        """Annotation and deserializer for a bare scalar or enum."""
        kind = type_kind(graphql_type)
        if kind is TypeKind.SCALAR:
            return self._scalar_output(graphql_type.name)
        if kind is TypeKind.ENUM:
            name = self.enum_class(graphql_type)
            return TypedOutput(name, f"{name}.deserialize(raw_value)", name)
        raise UnsupportedTypeKindError(graphql_type, "an output field")

    def _scalar_output(self, scalar_name: str) -> TypedOutput:
        handler = self._converter(scalar_name)
        if handler is not None:
            reference = self._reference(scalar_name, handler)
            return TypedOutput(handler.python_type, f"{reference}.deserialize(raw_value)")
        if scalar_name in DEFAULT_OUTPUTS:
            return TypedOutput(*DEFAULT_OUTPUTS[scalar_name])
        return TypedOutput("ScalarValue", "cast(ScalarValue, raw_value)")

    # =========================================================================
    # Input path
    # =========================================================================

    def input_for(self, graphql_type: GraphQLNamedType) -> TypedInput:
        """Annotation and serializer for a bare scalar, enum or input object."""
        kind = type_kind(graphql_type)
        if kind is TypeKind.SCALAR:
            return self._scalar_input(graphql_type.name)
        if kind is TypeKind.ENUM:
            name = self.enum_class(graphql_type)
            return TypedInput(name, "raw_value.serialize()", name)
        if kind is TypeKind.INPUT_OBJECT:
            name = self.input_class(graphql_type)
            return TypedInput(name, "raw_value.serialize()", name)
        raise UnsupportedTypeKindError(graphql_type, "an input value")

    def _scalar_input(self, scalar_name: str) -> TypedInput:
        handler = self._converter(scalar_name)
        if handler is not None:
            reference = self._reference(scalar_name, handler)
            return TypedInput(handler.python_type, f"{reference}.serialize(raw_value)")
        if scalar_name in DEFAULT_INPUTS:
            return TypedInput(DEFAULT_INPUTS[scalar_name], "raw_value")
        return TypedInput("ScalarValue", "raw_value")

    def variable_definition(
        self,
        graphql_name: str,
        graphql_type: GraphQLType,
        owner: str,
        reserved: frozenset[str] = OPERATION_RESERVED_NAMES,
    ) -> VariableDefinition:
        """Describe a variable or input field as a generated parameter.

        Raises:
            ReservedNameError: If the parameter name is taken on owner
        """
        name = safe_param_name(snake_case(graphql_name))
        if name in reserved:
            raise ReservedNameError(name, owner)

        unwrapped = unwrap_type(graphql_type)
        typed = self.input_for(unwrapped.named_type)
        serializer = render_serializer(
            build_input_expression(unwrapped.wrappers, typed.expression, name)
        )

        dependency = typed.dependency
        if dependency in self._pending_inputs:
            dependency = None

        return VariableDefinition(
            name=name,
            graphql_name=graphql_name,
            signature=wrap_signature(typed.signature, unwrapped.wrappers),
            serializer=serializer,
            dependency=dependency,
            optional=unwrapped.is_optional,
        )

    # =========================================================================
    # Class registration
    # =========================================================================

    def enum_class(self, enum_type: GraphQLEnumType) -> str:
        """Register the class of an enum type once and return its name.

        Raises:
            ReservedNameError: If a value would shadow a base class member or
                is a name ``Enum`` reserves
        """
        if enum_type.name not in self._enums:
            name = type_class_name(enum_type.name)
            for value in enum_type.values:
                if value in ENUM_RESERVED_NAMES or (value.startswith("_") and value.endswith("_")):
                    raise ReservedNameError(value, name)
            self.registry.add(
                EnumClass(
                    name=name,
                    graphql_type=enum_type.name,
                    serialized_values=tuple(enum_type.values),
                )
            )
            self._enums[enum_type.name] = name
        return self._enums[enum_type.name]

    def input_class(self, input_type: GraphQLInputObjectType) -> str:
        """Register the class of an input object type once and return its name.

        References back to an input class that is still being built are left
        out of the dependencies so recursive input types stay sortable.
        """
        name = type_class_name(input_type.name)
        if name in self._inputs or name in self._pending_inputs:
            return name

        self._pending_inputs.add(name)
        try:
            arguments = tuple(
                self.variable_definition(field_name, input_field.type, name, INPUT_RESERVED_NAMES)
                for field_name, input_field in input_type.fields.items()
            )
        finally:
            self._pending_inputs.discard(name)

        self.registry.add(
            InputClass(
                name=name,
                graphql_type=input_type.name,
                arguments=arguments,
                dependencies=frozenset(a.dependency for a in arguments if a.dependency),
            )
        )
        self._inputs[name] = name
        return name

    # =========================================================================
    # Scalar converters
    # =========================================================================

    def _converter(self, scalar_name: str) -> type | None:
        handler = self.scalars.get(scalar_name)
        if handler is None:
            handler = BUILTIN_CONVERTERS.get(scalar_name)
        return handler

    def _reference(self, scalar_name: str, handler: type) -> str:
        reference, import_line = converter_reference(scalar_name, handler)
        logger.debug("Converting scalar %s with %s", scalar_name, reference)
        self.imports.add(import_line)
        if handler.import_statement:
            self.imports.add(handler.import_statement)
        return reference
