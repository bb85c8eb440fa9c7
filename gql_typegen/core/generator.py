"""Code generator for GraphQL query documents.

Walks the selection sets of every operation and synthesizes one class per
distinct shape of selected data, then renders them with Jinja2 templates.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(schema, template_dir="./my_templates")
    generator.generate(QueryDeclaration(query_text))
    generator.write("queries.py")
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from graphql import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLError,
    GraphQLField,
    GraphQLNamedType,
    GraphQLSchema,
    InlineFragmentNode,
    NameNode,
    OperationDefinitionNode,
    SchemaMetaFieldDef,
    SelectionNode,
    SelectionSetNode,
    TypeMetaFieldDef,
    TypeNameMetaFieldDef,
    Visitor,
    is_interface_type,
    is_object_type,
    parse,
    print_ast,
    type_from_ast,
    validate,
    visit,
)

from .errors import (
    GenerationError,
    QueryValidationError,
    ReservedNameError,
    UnknownTypeError,
    UnresolvableFieldError,
    UnsupportedTypeKindError,
)
from .expressions import PLACEHOLDER
from .hooks import HookRunner
from .ir import (
    DefinedClass,
    EnumClass,
    FieldAccessMethod,
    FieldAccessPath,
    FileType,
    GeneratedFile,
    InputClass,
    LeafClass,
    RootClass,
    TypedOutput,
)
from .naming import ensure_operation_name, module_name, pascal_case, safe_param_name, snake_case
from .parser import QueryDeclaration
from .registry import ClassRegistry, sort_classes
from .renderer import ClassRenderer
from .resolver import TypeKind, TypeResolver, concrete_type_names, type_kind
from .result import OperationResult, QueryResult
from .scalars import ScalarRegistry
from .wrappers import TypeWrapper, build_output_expression, unwrap_type, wrap_signature

logger = logging.getLogger(__name__)

# Names generated accessors may not use
PROTECTED_NAMES = frozenset({*dir(object), *dir(QueryResult), *dir(OperationResult)})

FILE_TYPES = {
    RootClass: FileType.OPERATION,
    LeafClass: FileType.OBJECT_RESULT,
    InputClass: FileType.INPUT_OBJECT,
    EnumClass: FileType.ENUM,
}

TYPENAME_FIELD = "__typename"
CONDITIONAL_DIRECTIVES = frozenset({"include", "skip"})


class TypenameAdder(Visitor):
    """Adds ``__typename`` to the selection set of every object field."""

    def leave_selection_set(self, node: SelectionSetNode, _key, parent, *_args):
        if not isinstance(parent, FieldNode):
            return None
        for selection in node.selections:
            if (
                isinstance(selection, FieldNode)
                and selection.alias is None
                and selection.name.value == TYPENAME_FIELD
            ):
                return None
        typename = FieldNode(
            name=NameNode(value=TYPENAME_FIELD), arguments=(), directives=()
        )
        return SelectionSetNode(selections=(*node.selections, typename))


def add_typename(document):
    """Return a copy of document selecting ``__typename`` in every object."""
    return visit(document, TypenameAdder())


def accessor_name(field_node: FieldNode, owner: str) -> str:
    """Accessor name for a field selection.

    Raises:
        ReservedNameError: If the name is taken by the result base classes
    """
    response_name = field_node.alias.value if field_node.alias else field_node.name.value
    name = snake_case(response_name)
    if name.startswith("__"):
        # Would be mangled inside the class body
        name = name.lstrip("_")
    if name in PROTECTED_NAMES:
        raise ReservedNameError(name, owner)
    return safe_param_name(name)


def leaf_class_name(parent: str, field_node: FieldNode) -> str:
    """Name of the class generated for a field's sub-selection."""
    field_part = pascal_case(field_node.name.value)
    if field_node.alias:
        return f"{parent}__{pascal_case(field_node.alias.value)}_{field_part}"
    return f"{parent}__{field_part}"


class CodeGenerator:
    """Generates typed result classes from GraphQL query documents.

    Supports custom templates via the template_dir parameter.
    Templates in template_dir take precedence over built-in templates.

    Example:
        schema = SchemaParser("./schema").parse_all()
        generator = CodeGenerator(schema, scalars=ScalarRegistry())
        for declaration in load_query_declarations("./queries"):
            generator.generate(declaration)
        generator.write("./generated", split=True)
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        scalars: Optional[ScalarRegistry] = None,
        template_dir: Optional[str] = None,
        validate_documents: bool = True,
        hooks: Optional[HookRunner] = None,
    ):
        """Initialize the code generator.

        Args:
            schema: The schema query documents are checked against
            scalars: Handlers for custom scalars (defaults to the built-in registry)
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            validate_documents: Validate each document against the schema first
            hooks: Hooks run on documents before generation and files after it
        """
        self.schema = schema
        self.scalars = scalars if scalars is not None else ScalarRegistry()
        self.validate_documents = validate_documents
        self.hooks = hooks or HookRunner()
        self.registry = ClassRegistry()
        self.resolver = TypeResolver(schema, self.scalars, self.registry)
        self.renderer = ClassRenderer(template_dir)

    # =========================================================================
    # Documents
    # =========================================================================

    def generate(self, declaration: QueryDeclaration | str):
        """Generate classes for every operation of a query document."""
        if isinstance(declaration, str):
            declaration = QueryDeclaration(declaration)
        declaration = self.hooks.run_pre_hooks(declaration)
        logger.info("Generating classes for %s", declaration.source)

        try:
            document = parse(declaration.query_text)
        except GraphQLError as e:
            raise QueryValidationError(declaration.source, [e]) from e

        operations = [d for d in document.definitions if isinstance(d, OperationDefinitionNode)]
        for operation in operations:
            ensure_operation_name(operation.name.value if operation.name else None)

        if self.validate_documents:
            errors = validate(self.schema, document)
            if errors:
                raise QueryValidationError(declaration.source, errors)

        fragments = {
            d.name.value: d for d in document.definitions if isinstance(d, FragmentDefinitionNode)
        }
        query_text = print_ast(add_typename(document))

        for operation in operations:
            self._generate_operation(operation, fragments, query_text)

    def _generate_operation(
        self,
        operation: OperationDefinitionNode,
        fragments: dict[str, FragmentDefinitionNode],
        query_text: str,
    ):
        name = operation.name.value
        operation_type = operation.operation.value
        root_type = {
            "query": self.schema.query_type,
            "mutation": self.schema.mutation_type,
            "subscription": self.schema.subscription_type,
        }.get(operation_type)
        if root_type is None:
            raise GenerationError(f"Schema does not define a {operation_type} root type")

        variables = []
        for definition in operation.variable_definitions or ():
            graphql_type = type_from_ast(self.schema, definition.type)
            if graphql_type is None:
                raise UnknownTypeError(print_ast(definition.type))
            variables.append(
                self.resolver.variable_definition(definition.variable.name.value, graphql_type, name)
            )
        seen = set()
        for variable in variables:
            if variable.name in seen:
                raise ReservedNameError(variable.name, name)
            seen.add(variable.name)

        methods, dependencies = self._generate_methods(
            name,
            root_type,
            frozenset((root_type.name,)),
            (),
            operation.selection_set.selections,
            fragments,
        )
        dependencies |= {v.dependency for v in variables if v.dependency}

        self.registry.add(
            RootClass(
                name=name,
                operation_name=name,
                operation_type=operation_type,
                graphql_type=root_type.name,
                possible_types=(root_type.name,),
                query_text=query_text,
                variables=tuple(variables),
                defined_methods=tuple(methods.values()),
                dependencies=frozenset(dependencies),
            )
        )

    # =========================================================================
    # Selection traversal
    # =========================================================================

    def _generate_leaf_class(
        self,
        class_name: str,
        graphql_type: GraphQLNamedType,
        selections: Iterable[SelectionNode],
        fragments: dict[str, FragmentDefinitionNode],
    ) -> str:
        possible_types = concrete_type_names(self.schema, graphql_type)
        methods, dependencies = self._generate_methods(
            class_name, graphql_type, frozenset(possible_types), (), selections, fragments
        )
        self.registry.merge(
            LeafClass(
                name=class_name,
                graphql_type=graphql_type.name,
                possible_types=possible_types,
                defined_methods=tuple(methods.values()),
                dependencies=frozenset(dependencies),
            )
        )
        return class_name

    def _generate_methods(
        self,
        class_name: str,
        owner_type: GraphQLNamedType,
        typenames: frozenset[str],
        fragment_types: tuple[str, ...],
        selections: Iterable[SelectionNode],
        fragments: dict[str, FragmentDefinitionNode],
        methods: Optional[dict[str, FieldAccessMethod]] = None,
        dependencies: Optional[set[str]] = None,
        conditional: bool = False,
    ) -> tuple[dict[str, FieldAccessMethod], set[str]]:
        """Collect the accessors of one selection set into methods.

        Direct fields come first, then fragments in document order, each
        fragment narrowing typenames to the types its condition allows.
        Fields under an ``@include`` or ``@skip`` fragment are read as
        possibly missing, like fields carrying the directive themselves.
        """
        if methods is None:
            methods = {}
        if dependencies is None:
            dependencies = set()
        selections = list(selections)

        for selection in selections:
            if not isinstance(selection, FieldNode):
                continue
            if selection.alias is None and selection.name.value == TYPENAME_FIELD:
                continue

            name = accessor_name(selection, class_name)
            path = self._field_access_path(
                class_name,
                owner_type,
                typenames,
                fragment_types,
                selection,
                fragments,
                dependencies,
                conditional or self._is_conditional(selection),
            )
            method = FieldAccessMethod(name, (path,))
            methods[name] = methods[name].merge(method) if name in methods else method

        for selection in selections:
            if isinstance(selection, InlineFragmentNode):
                if selection.type_condition is None:
                    fragment_type = owner_type
                else:
                    fragment_type = self._named_type(selection.type_condition.name.value)
                sub_selections = selection.selection_set.selections
            elif isinstance(selection, FragmentSpreadNode):
                fragment = fragments.get(selection.name.value)
                if fragment is None:
                    raise GenerationError(f"Unknown fragment: {selection.name.value}")
                fragment_type = self._named_type(fragment.type_condition.name.value)
                sub_selections = fragment.selection_set.selections
            else:
                continue

            narrowed = typenames & frozenset(concrete_type_names(self.schema, fragment_type))
            self._generate_methods(
                class_name,
                fragment_type,
                narrowed,
                (*fragment_types, fragment_type.name),
                sub_selections,
                fragments,
                methods,
                dependencies,
                conditional or self._is_conditional(selection),
            )

        return methods, dependencies

    def _field_access_path(
        self,
        class_name: str,
        owner_type: GraphQLNamedType,
        typenames: frozenset[str],
        fragment_types: tuple[str, ...],
        field_node: FieldNode,
        fragments: dict[str, FragmentDefinitionNode],
        dependencies: set[str],
        conditional: bool = False,
    ) -> FieldAccessPath:
        field_def = self._field_definition(owner_type, field_node.name.value)
        unwrapped = unwrap_type(field_def.type)
        named_type = unwrapped.named_type
        kind = type_kind(named_type)

        if kind.is_composite:
            if field_node.selection_set is None:
                raise GenerationError(
                    f"Field {owner_type.name}.{field_node.name.value} needs a selection set"
                )
            sub_class = self._generate_leaf_class(
                leaf_class_name(class_name, field_node),
                named_type,
                field_node.selection_set.selections,
                fragments,
            )
            typed = TypedOutput(sub_class, f"{sub_class}({PLACEHOLDER})", sub_class)
        elif kind is TypeKind.INPUT_OBJECT:
            raise UnsupportedTypeKindError(named_type, f"field {owner_type.name}.{field_node.name.value}")
        else:
            typed = self.resolver.output_for(named_type)

        if typed.dependency:
            dependencies.add(typed.dependency)

        response_name = field_node.alias.value if field_node.alias else field_node.name.value
        wrappers = unwrapped.wrappers
        if conditional:
            # Skipped fields are missing from the response
            access = f'self.raw_result.get("{response_name}")'
            if not wrappers or wrappers[0] is not TypeWrapper.NILABLE:
                wrappers = [TypeWrapper.NILABLE, *wrappers]
        else:
            access = f'self.raw_result["{response_name}"]'

        return FieldAccessPath(
            signature=wrap_signature(typed.signature, wrappers),
            expression=build_output_expression(
                wrappers, access, unwrapped.array_depth, 0, typed.expression
            ),
            fragment_types=fragment_types,
            typenames=typenames,
        )

    def _field_definition(self, owner_type: GraphQLNamedType, field_name: str) -> GraphQLField:
        if field_name == TYPENAME_FIELD:
            return TypeNameMetaFieldDef
        if is_object_type(owner_type) or is_interface_type(owner_type):
            field_def = owner_type.fields.get(field_name)
            if field_def is not None:
                return field_def
        if owner_type is self.schema.query_type:
            if field_name == "__schema":
                return SchemaMetaFieldDef
            if field_name == "__type":
                return TypeMetaFieldDef
        raise UnresolvableFieldError(owner_type.name, field_name)

    def _named_type(self, type_name: str) -> GraphQLNamedType:
        graphql_type = self.schema.get_type(type_name)
        if graphql_type is None:
            raise UnknownTypeError(type_name)
        return graphql_type

    @staticmethod
    def _is_conditional(selection: SelectionNode) -> bool:
        return any(d.name.value in CONDITIONAL_DIRECTIVES for d in selection.directives or ())

    # =========================================================================
    # Output
    # =========================================================================

    @property
    def classes(self) -> dict[str, DefinedClass]:
        """Generated classes by name, in registration order."""
        return {c.name: c for c in self.registry}

    def sorted_classes(self) -> list[DefinedClass]:
        """Generated classes, each after every class it depends on."""
        return sort_classes(self.registry)

    def contents(self) -> str:
        """Render every generated class into a single module."""
        return self.renderer.render_module(self.sorted_classes(), self.resolver.imports)

    def content_files(self) -> list[GeneratedFile]:
        """Render one module per generated class, in dependency order."""
        files = []
        for defined_class in self.sorted_classes():
            filename = f"{module_name(defined_class.name)}.py"
            code = self.renderer.render_module(
                [defined_class],
                self.resolver.imports,
                local_imports={
                    f"from .{module_name(dep)} import {dep}"
                    for dep in defined_class.dependencies
                },
                filename=filename,
            )
            files.append(
                GeneratedFile(
                    constant_name=defined_class.name,
                    dependencies=defined_class.dependencies,
                    code=code,
                    type=FILE_TYPES[type(defined_class)],
                )
            )
        return files

    def write(self, output: str, split: bool = False, hooks: Optional[HookRunner] = None) -> list[Path]:
        """Write generated code to disk.

        Args:
            output: Module path, or the package directory when split is set
            split: Write one module per class plus an ``__init__.py``
            hooks: Hooks to run on each file instead of the generator's own

        Returns:
            Paths of the written files
        """
        hooks = hooks or self.hooks
        if not split:
            path = Path(output)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(hooks.run_post_hooks(path.name, self.contents()))
            logger.info("Wrote %d classes to %s", len(self.registry), path)
            return [path]

        os.makedirs(output, exist_ok=True)
        written = []
        for generated in self.content_files():
            path = Path(output) / f"{module_name(generated.constant_name)}.py"
            path.write_text(hooks.run_post_hooks(path.name, generated.code))
            written.append(path)

        init_path = Path(output) / "__init__.py"
        init_code = self.renderer.render_package_init(self.sorted_classes())
        init_path.write_text(hooks.run_post_hooks(init_path.name, init_code))
        written.append(init_path)
        logger.info("Wrote %d classes to %s", len(self.registry), output)
        return written
