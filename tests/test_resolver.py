"""Tests for scalar, enum and input object resolution."""

import pytest
from graphql import GraphQLID, GraphQLNonNull, build_schema

from gql_typegen.core.errors import ReservedNameError, UnsupportedTypeKindError
from gql_typegen.core.ir import EnumClass, InputClass, TypedInput, TypedOutput
from gql_typegen.core.registry import ClassRegistry, sort_classes
from gql_typegen.core.resolver import (
    INPUT_RESERVED_NAMES,
    TypeKind,
    TypeResolver,
    concrete_type_names,
    type_kind,
)
from gql_typegen.core.scalars import ScalarRegistry, UUIDHandler


@pytest.fixture
def resolver(schema):
    return TypeResolver(schema, ScalarRegistry(), ClassRegistry())


def make_resolver(sdl: str) -> TypeResolver:
    return TypeResolver(build_schema(sdl), ScalarRegistry(), ClassRegistry())


class TestTypeKind:
    """Tests for type_kind and concrete_type_names."""

    def test_kinds(self, schema):
        assert type_kind(schema.get_type("String")) is TypeKind.SCALAR
        assert type_kind(schema.get_type("Role")) is TypeKind.ENUM
        assert type_kind(schema.get_type("User")) is TypeKind.OBJECT
        assert type_kind(schema.get_type("Node")) is TypeKind.INTERFACE
        assert type_kind(schema.get_type("Actor")) is TypeKind.UNION
        assert type_kind(schema.get_type("UserFilter")) is TypeKind.INPUT_OBJECT

    def test_wrapped_type_is_unsupported(self):
        with pytest.raises(UnsupportedTypeKindError):
            type_kind(GraphQLNonNull(GraphQLID))

    def test_concrete_type_names(self, schema):
        assert concrete_type_names(schema, schema.get_type("User")) == ("User",)
        assert concrete_type_names(schema, schema.get_type("Node")) == ("User", "Bot")
        assert concrete_type_names(schema, schema.get_type("Actor")) == ("User", "Bot")

    def test_concrete_type_names_of_leaf(self, schema):
        with pytest.raises(UnsupportedTypeKindError):
            concrete_type_names(schema, schema.get_type("Role"))


class TestOutputResolution:
    """Tests for TypeResolver.output_for."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("Boolean", TypedOutput("bool", "cast(bool, raw_value)")),
            ("Int", TypedOutput("int", "cast(int, raw_value)")),
            ("Float", TypedOutput("float", "float(raw_value)")),
            ("String", TypedOutput("str", "cast(str, raw_value)")),
            ("ID", TypedOutput("str", "cast(str, raw_value)")),
            ("BigInt", TypedOutput("int", "int(raw_value)")),
        ],
    )
    def test_builtin_scalars(self, resolver, schema, type_name, expected):
        assert resolver.output_for(schema.get_type(type_name)) == expected
        assert resolver.imports == set()

    def test_registered_converter(self, resolver, schema):
        typed = resolver.output_for(schema.get_type("Date"))
        assert typed == TypedOutput("date", "DateHandler.deserialize(raw_value)")
        assert "from gql_typegen.core.scalars import DateHandler" in resolver.imports
        assert "from datetime import date" in resolver.imports

    def test_registry_overrides_builtin(self, schema):
        scalars = ScalarRegistry()
        scalars.register("ID", UUIDHandler)
        resolver = TypeResolver(schema, scalars, ClassRegistry())
        assert resolver.output_for(schema.get_type("ID")) == TypedOutput(
            "UUID", "UUIDHandler.deserialize(raw_value)"
        )

    def test_iso8601_scalars_convert_without_registration(self):
        resolver = make_resolver("scalar ISO8601DateTime type Query { at: ISO8601DateTime }")
        typed = resolver.output_for(resolver.schema.get_type("ISO8601DateTime"))
        assert typed == TypedOutput("datetime", "DateTimeHandler.deserialize(raw_value)")

    def test_unknown_scalar(self):
        resolver = make_resolver("scalar Money type Query { price: Money }")
        typed = resolver.output_for(resolver.schema.get_type("Money"))
        assert typed == TypedOutput("ScalarValue", "cast(ScalarValue, raw_value)")

    def test_enum_registers_once(self, resolver, schema):
        role = schema.get_type("Role")
        assert resolver.output_for(role) == TypedOutput("Role", "Role.deserialize(raw_value)", "Role")
        resolver.output_for(role)
        resolver.input_for(role)

        assert len(resolver.registry) == 1
        assert resolver.registry.get("Role") == EnumClass("Role", "Role", ("ADMIN", "MEMBER"))

    @pytest.mark.parametrize("value", ["serialize", "deserialize", "_ignore_"])
    def test_enum_value_taken_by_base_class(self, value):
        resolver = make_resolver(f"enum Mode {{ {value} SAFE }} type Query {{ mode: Mode }}")
        with pytest.raises(ReservedNameError, match=value):
            resolver.output_for(resolver.schema.get_type("Mode"))
        assert len(resolver.registry) == 0

    def test_composite_is_not_a_leaf(self, resolver, schema):
        with pytest.raises(UnsupportedTypeKindError):
            resolver.output_for(schema.get_type("User"))

    def test_input_object_on_output_path(self, resolver, schema):
        with pytest.raises(UnsupportedTypeKindError, match="UserFilter"):
            resolver.output_for(schema.get_type("UserFilter"))


class TestInputResolution:
    """Tests for TypeResolver.input_for and input object classes."""

    def test_builtin_scalar_is_identity(self, resolver, schema):
        assert resolver.input_for(schema.get_type("Int")) == TypedInput("int", "raw_value")
        assert resolver.input_for(schema.get_type("BigInt")) == TypedInput("int", "raw_value")

    def test_converter(self, resolver, schema):
        assert resolver.input_for(schema.get_type("DateTime")) == TypedInput(
            "datetime", "DateTimeHandler.serialize(raw_value)"
        )

    def test_enum(self, resolver, schema):
        assert resolver.input_for(schema.get_type("Role")) == TypedInput(
            "Role", "raw_value.serialize()", "Role"
        )

    def test_input_object(self, resolver, schema):
        typed = resolver.input_for(schema.get_type("UserFilter"))
        assert typed == TypedInput("UserFilter", "raw_value.serialize()", "UserFilter")

        input_class = resolver.registry.get("UserFilter")
        assert isinstance(input_class, InputClass)
        assert [a.name for a in input_class.arguments] == [
            "role", "name", "ids", "created_after", "parent"
        ]
        # Self reference is not a dependency
        assert input_class.dependencies == frozenset({"Role"})

        arguments = {a.name: a for a in input_class.arguments}
        assert arguments["created_after"].graphql_name == "createdAfter"
        assert arguments["created_after"].serializer == (
            "None if raw_value is None else DateTimeHandler.serialize(raw_value)"
        )
        assert arguments["ids"].signature == "Optional[List[str]]"
        assert arguments["parent"].signature == "Optional[UserFilter]"
        assert arguments["parent"].dependency is None
        assert all(a.optional for a in input_class.arguments)

    def test_input_object_registers_once(self, resolver, schema):
        resolver.input_for(schema.get_type("UserFilter"))
        resolver.input_for(schema.get_type("UserFilter"))
        assert [c.name for c in resolver.registry] == ["Role", "UserFilter"]

    def test_mutually_recursive_inputs_stay_sortable(self):
        resolver = make_resolver(
            """
            input A { b: B, value: Int! }
            input B { a: A }
            type Query { find(a: A): Int }
            """
        )
        resolver.input_for(resolver.schema.get_type("A"))
        assert resolver.registry.get("A").dependencies == frozenset({"B"})
        assert resolver.registry.get("B").dependencies == frozenset()
        assert [c.name for c in sort_classes(resolver.registry)] == ["B", "A"]

    def test_composite_on_input_path(self, resolver, schema):
        with pytest.raises(UnsupportedTypeKindError):
            resolver.input_for(schema.get_type("User"))


class TestVariableDefinition:
    """Tests for TypeResolver.variable_definition."""

    def test_required_variable(self, resolver):
        variable = resolver.variable_definition("userId", GraphQLNonNull(GraphQLID), "GetUser")
        assert variable.name == "user_id"
        assert variable.graphql_name == "userId"
        assert variable.signature == "str"
        assert variable.serializer == "raw_value"
        assert variable.dependency is None
        assert not variable.optional

    def test_list_of_enums(self, resolver, schema):
        roles_type = schema.mutation_type.fields["updateUser"].args["roles"].type
        variable = resolver.variable_definition("roles", roles_type, "UpdateUser")
        assert variable.signature == "Optional[List[Role]]"
        assert variable.optional
        assert variable.dependency == "Role"
        assert variable.serializer_for("roles") == (
            "None if roles is None else [roles1.serialize() for roles1 in roles]"
        )

    def test_keyword_gets_suffix(self, resolver):
        variable = resolver.variable_definition("class", GraphQLID, "GetUser")
        assert variable.name == "class_"

    def test_reserved_operation_parameter(self, resolver):
        with pytest.raises(ReservedNameError, match="executor"):
            resolver.variable_definition("executor", GraphQLID, "GetUser")

    def test_reserved_input_field(self, resolver):
        with pytest.raises(ReservedNameError, match="serialize"):
            resolver.variable_definition("serialize", GraphQLID, "Filter", INPUT_RESERVED_NAMES)
