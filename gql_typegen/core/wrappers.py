"""Type wrapper algebra.

GraphQL types are nullable by default and opt out with ``!``; Python
annotations are the other way round. Unwrapping a schema type records the
``Optional``/``List`` layers it needs, outermost first, so the same sequence
can rebuild both the annotation and the conversion code.

Example:
    ``[[Int]!]`` unwraps to ``[NILABLE, ARRAY, ARRAY, NILABLE]`` and ``Int``,
    which rewraps to ``Optional[List[List[Optional[int]]]]``.
"""

from enum import Enum
from typing import NamedTuple

from graphql import GraphQLNamedType, GraphQLType, is_list_type, is_non_null_type

from .expressions import (
    PLACEHOLDER,
    Deserialize,
    InputExpression,
    MapEach,
    NilGuard,
    OutputExpression,
    Serialize,
    SerializeEach,
    SerializeIfPresent,
)


class TypeWrapper(Enum):
    """A single layer around a bare type."""
    NILABLE = "nilable"
    ARRAY = "array"


class UnwrappedType(NamedTuple):
    """A bare named type plus the wrappers peeled off it, outermost first."""
    wrappers: list[TypeWrapper]
    named_type: GraphQLNamedType
    array_depth: int

    @property
    def is_optional(self) -> bool:
        return bool(self.wrappers) and self.wrappers[0] is TypeWrapper.NILABLE


def unwrap_type(graphql_type: GraphQLType) -> UnwrappedType:
    """Peel non-null and list modifiers off a schema type."""
    wrappers: list[TypeWrapper] = []
    current = graphql_type
    skip_nilable = False
    array_depth = 0

    while True:
        if is_non_null_type(current):
            current = current.of_type
            skip_nilable = True
            continue

        if not skip_nilable:
            wrappers.append(TypeWrapper.NILABLE)
        skip_nilable = False

        if is_list_type(current):
            wrappers.append(TypeWrapper.ARRAY)
            array_depth += 1
            current = current.of_type
            continue

        return UnwrappedType(wrappers, current, array_depth)


def wrap_signature(signature: str, wrappers: list[TypeWrapper]) -> str:
    """Rebuild a type annotation from a bare signature, innermost layer first."""
    for wrapper in reversed(wrappers):
        if wrapper is TypeWrapper.ARRAY:
            signature = f"List[{signature}]"
        else:
            signature = f"Optional[{signature}]"
    return signature


def build_output_expression(
    wrappers: list[TypeWrapper],
    variable_name: str,
    array_depth: int,
    level: int,
    core_expression: str,
) -> OutputExpression:
    """Build the deserialization tree for a wrapped value.

    Args:
        wrappers: Remaining wrappers, outermost first
        variable_name: Expression holding the current raw value
        array_depth: Number of ARRAY wrappers still in ``wrappers``
        level: Number of enclosing map bodies (0 at the top level)
        core_expression: Conversion of the bare value, using the placeholder
    """
    if not wrappers:
        if level == 0:
            return Deserialize(core_expression, variable_name)
        return Deserialize(core_expression)

    wrapper, rest = wrappers[0], wrappers[1:]
    if wrapper is TypeWrapper.ARRAY:
        array_depth -= 1
        item = PLACEHOLDER if array_depth == 0 else f"inner_value{array_depth}"
        return MapEach(
            source=variable_name,
            item=item,
            body=build_output_expression(rest, item, array_depth, level + 1, core_expression),
        )

    return NilGuard(
        variable=variable_name,
        body=build_output_expression(rest, variable_name, array_depth, level, core_expression),
        nested=level > 0,
    )


def build_input_expression(
    wrappers: list[TypeWrapper],
    core_serializer: str,
    item_prefix: str,
) -> InputExpression:
    """Build the serialization tree for a wrapped value, innermost layer first."""
    expression: InputExpression = Serialize(core_serializer)
    index = sum(1 for w in wrappers if w is TypeWrapper.ARRAY)

    for wrapper in reversed(wrappers):
        if wrapper is TypeWrapper.ARRAY:
            expression = SerializeEach(item=f"{item_prefix}{index}", body=expression)
            index -= 1
        else:
            expression = SerializeIfPresent(expression)
    return expression
