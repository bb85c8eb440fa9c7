"""Errors raised while generating code.

Every error is fatal to a generation run; none are recovered internally.
"""

from typing import Any


class GenerationError(Exception):
    """Base class for all code generation failures."""


class ClassRedefinitionError(GenerationError):
    """Two selections produced the same class name with incompatible definitions."""

    def __init__(self, name: str, message: str):
        super().__init__(f"Attempting to redefine class {name}: {message}")
        self.name = name


class InvalidIdentifierError(GenerationError):
    """An operation name cannot be used as a generated class name."""

    def __init__(self, name: str | None):
        super().__init__(
            "Operation names must be valid Python class names starting with an "
            f"uppercase letter (got {name!r})"
        )
        self.name = name


class UnresolvableFieldError(GenerationError):
    """A selected field has no definition on its owner type."""

    def __init__(self, type_name: str, field_name: str):
        super().__init__(f"No field definition for {type_name}.{field_name}")
        self.type_name = type_name
        self.field_name = field_name


class UnsupportedTypeKindError(GenerationError):
    """A schema type has a kind the generator does not model on this path."""

    def __init__(self, graphql_type: Any, context: str = ""):
        name = getattr(graphql_type, "name", None) or repr(graphql_type)
        message = f"Unhandled GraphQL type kind: {name} ({type(graphql_type).__name__})"
        if context:
            message = f"{message} in {context}"
        super().__init__(message)
        self.graphql_type = graphql_type


class UnknownTypeError(GenerationError):
    """A document references a type name the schema does not define."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown GraphQL type: {type_name}")
        self.type_name = type_name


class ScalarConverterError(GenerationError):
    """A scalar converter cannot be referenced by name from generated code."""

    def __init__(self, scalar_name: str, converter: Any):
        super().__init__(
            f"Expected the converter for scalar {scalar_name} to be an importable "
            f"module-level class (got {converter!r})"
        )
        self.scalar_name = scalar_name
        self.converter = converter


class ReservedNameError(GenerationError):
    """A generated member name collides with a name the base classes reserve."""

    def __init__(self, name: str, owner: str):
        super().__init__(f"Generated name {name!r} on {owner} collides with a reserved name")
        self.name = name
        self.owner = owner


class QueryValidationError(GenerationError):
    """A query document failed to parse or validate against the schema."""

    def __init__(self, source: str, errors: list[Any]):
        details = "; ".join(str(getattr(e, "message", e)) for e in errors)
        super().__init__(f"Invalid query document {source}: {details}")
        self.source = source
        self.errors = errors


class DependencyCycleError(GenerationError):
    """Generated classes depend on each other in a cycle."""

    def __init__(self, cycle: list[str]):
        super().__init__(f"Dependency cycle between generated classes: {' -> '.join(cycle)}")
        self.cycle = cycle
