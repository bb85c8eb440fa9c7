"""Core modules for GraphQL code generation."""

from .errors import (
    ClassRedefinitionError,
    DependencyCycleError,
    GenerationError,
    InvalidIdentifierError,
    QueryValidationError,
    ReservedNameError,
    ScalarConverterError,
    UnknownTypeError,
    UnresolvableFieldError,
    UnsupportedTypeKindError,
)
from .executor import GraphQLError, GraphQLErrorItem, GraphQLExecutor, GraphQLResponse
from .generator import CodeGenerator
from .hooks import (
    AddHeaderHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .ir import (
    EnumClass,
    FieldAccessMethod,
    FieldAccessPath,
    FileType,
    GeneratedFile,
    InputClass,
    LeafClass,
    RootClass,
    VariableDefinition,
)
from .parser import QueryDeclaration, SchemaParser, load_query_declarations
from .registry import ClassRegistry, sort_classes
from .result import (
    GraphQLEnum,
    InputObject,
    OperationResult,
    QueryResult,
    ScalarValue,
    UnexpectedTypenameError,
)
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    ScalarHandler,
    ScalarRegistry,
    UUIDHandler,
)
from .wrappers import TypeWrapper, unwrap_type, wrap_signature

__all__ = [
    # Errors
    "GenerationError",
    "ClassRedefinitionError",
    "DependencyCycleError",
    "InvalidIdentifierError",
    "QueryValidationError",
    "ReservedNameError",
    "ScalarConverterError",
    "UnknownTypeError",
    "UnresolvableFieldError",
    "UnsupportedTypeKindError",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "HookRunner",
    # IR types
    "EnumClass",
    "FieldAccessMethod",
    "FieldAccessPath",
    "FileType",
    "GeneratedFile",
    "InputClass",
    "LeafClass",
    "RootClass",
    "VariableDefinition",
    # Wrappers
    "TypeWrapper",
    "unwrap_type",
    "wrap_signature",
    # Parser
    "QueryDeclaration",
    "SchemaParser",
    "load_query_declarations",
    # Registry
    "ClassRegistry",
    "sort_classes",
    # Generator
    "CodeGenerator",
    # Runtime
    "GraphQLEnum",
    "InputObject",
    "OperationResult",
    "QueryResult",
    "ScalarValue",
    "UnexpectedTypenameError",
    # Executor
    "GraphQLError",
    "GraphQLErrorItem",
    "GraphQLExecutor",
    "GraphQLResponse",
]
