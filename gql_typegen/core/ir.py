"""Intermediate Representation (IR) for generated classes.

This module defines the records the generator builds while walking query
documents, one per class that will be emitted. Records are immutable; merging
two leaf records returns a new one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from .errors import ClassRedefinitionError
from .expressions import OutputExpression, substitute


@dataclass(frozen=True)
class TypedOutput:
    """Result type and conversion of a bare output type.

    ``expression`` is a template over the ``raw_value`` placeholder.
    """
    signature: str
    expression: str
    dependency: str | None = None


@dataclass(frozen=True)
class TypedInput:
    """Parameter type and serializer of a bare input type."""
    signature: str
    expression: str
    dependency: str | None = None


@dataclass(frozen=True)
class VariableDefinition:
    """An operation variable or an input object field."""
    name: str
    graphql_name: str
    signature: str
    serializer: str
    dependency: str | None = None
    optional: bool = False

    def serializer_for(self, reference: str) -> str:
        """Serializer expression applied to reference."""
        return substitute(self.serializer, reference)


@dataclass(frozen=True)
class FieldAccessPath:
    """One way of reading a field, valid for the runtime types in ``typenames``."""
    signature: str
    expression: OutputExpression
    fragment_types: tuple[str, ...] = ()
    typenames: frozenset[str] = frozenset()


@dataclass(frozen=True)
class FieldAccessMethod:
    """A generated accessor and every path that can produce its value."""
    name: str
    field_access_paths: tuple[FieldAccessPath, ...]

    def merge(self, other: "FieldAccessMethod") -> "FieldAccessMethod":
        paths = list(self.field_access_paths)
        for path in other.field_access_paths:
            if path not in paths:
                paths.append(path)
        return replace(self, field_access_paths=tuple(paths))


def merge_methods(
    existing: tuple[FieldAccessMethod, ...],
    incoming: tuple[FieldAccessMethod, ...],
) -> tuple[FieldAccessMethod, ...]:
    """Union two method lists by name, merging paths of same-named methods."""
    merged = {method.name: method for method in existing}
    for method in incoming:
        if method.name in merged:
            merged[method.name] = merged[method.name].merge(method)
        else:
            merged[method.name] = method
    return tuple(merged.values())


@dataclass(frozen=True)
class RootClass:
    """Result class of one operation."""
    name: str
    operation_name: str
    operation_type: str
    graphql_type: str
    possible_types: tuple[str, ...]
    query_text: str
    variables: tuple[VariableDefinition, ...] = ()
    defined_methods: tuple[FieldAccessMethod, ...] = ()
    dependencies: frozenset[str] = frozenset()


@dataclass(frozen=True)
class LeafClass:
    """Class for one selection shape of an object, interface or union."""
    name: str
    graphql_type: str
    possible_types: tuple[str, ...]
    defined_methods: tuple[FieldAccessMethod, ...] = ()
    dependencies: frozenset[str] = frozenset()

    def merge(self, other: "LeafClass") -> "LeafClass":
        if other.graphql_type != self.graphql_type:
            raise ClassRedefinitionError(
                self.name,
                f"selected on {self.graphql_type} and on {other.graphql_type}",
            )
        return replace(
            self,
            defined_methods=merge_methods(self.defined_methods, other.defined_methods),
            dependencies=self.dependencies | other.dependencies,
        )


@dataclass(frozen=True)
class InputClass:
    """Class for an input object type used by a variable."""
    name: str
    graphql_type: str
    arguments: tuple[VariableDefinition, ...] = ()
    dependencies: frozenset[str] = frozenset()


@dataclass(frozen=True)
class EnumClass:
    """Class for an enum type used by a selection or variable."""
    name: str
    graphql_type: str
    serialized_values: tuple[str, ...]
    dependencies: frozenset[str] = field(default_factory=frozenset)


DefinedClass = Union[RootClass, LeafClass, InputClass, EnumClass]


def merge_classes(existing: DefinedClass, incoming: DefinedClass) -> DefinedClass:
    """Merge a newly synthesized class into the one already registered."""
    if isinstance(existing, LeafClass) and isinstance(incoming, LeafClass):
        return existing.merge(incoming)
    raise ClassRedefinitionError(
        existing.name,
        f"already defined as {type(existing).__name__}, "
        f"cannot merge {type(incoming).__name__}",
    )


class FileType(Enum):
    """Kind of class a generated file holds."""
    OPERATION = "operation"
    OBJECT_RESULT = "object_result"
    INPUT_OBJECT = "input_object"
    ENUM = "enum"


@dataclass(frozen=True)
class GeneratedFile:
    """Source of one generated class, as written in split mode."""
    constant_name: str
    dependencies: frozenset[str]
    code: str
    type: FileType
