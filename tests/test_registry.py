"""Tests for class records, the class registry and dependency sorting."""

import pytest

from gql_typegen.core.errors import ClassRedefinitionError, DependencyCycleError, GenerationError
from gql_typegen.core.expressions import Deserialize
from gql_typegen.core.ir import (
    EnumClass,
    FieldAccessMethod,
    FieldAccessPath,
    InputClass,
    LeafClass,
    merge_classes,
)
from gql_typegen.core.registry import ClassRegistry, sort_classes


def path(signature="str", typenames=("User",), fragment_types=()):
    return FieldAccessPath(
        signature=signature,
        expression=Deserialize("cast(str, raw_value)", 'self.raw_result["name"]'),
        fragment_types=fragment_types,
        typenames=frozenset(typenames),
    )


def leaf(name="Op__User", graphql_type="User", methods=(), dependencies=()):
    return LeafClass(
        name=name,
        graphql_type=graphql_type,
        possible_types=(graphql_type,),
        defined_methods=tuple(methods),
        dependencies=frozenset(dependencies),
    )


# =============================================================================
# Merging
# =============================================================================


class TestFieldAccessMethod:
    """Tests for FieldAccessMethod.merge."""

    def test_merge_appends_new_paths(self):
        first = FieldAccessMethod("name", (path(),))
        second = FieldAccessMethod("name", (path(fragment_types=("User",)),))
        merged = first.merge(second)
        assert len(merged.field_access_paths) == 2

    def test_merge_is_idempotent(self):
        method = FieldAccessMethod("name", (path(),))
        assert method.merge(method) == method


class TestLeafClassMerge:
    """Tests for LeafClass.merge and merge_classes."""

    def test_unions_methods_and_dependencies(self):
        first = leaf(methods=[FieldAccessMethod("name", (path(),))], dependencies={"Role"})
        second = leaf(
            methods=[FieldAccessMethod("age", (path("Optional[int]"),))],
            dependencies={"Op__User__Friends"},
        )
        merged = first.merge(second)
        assert [m.name for m in merged.defined_methods] == ["name", "age"]
        assert merged.dependencies == frozenset({"Role", "Op__User__Friends"})

    def test_merge_is_order_independent(self):
        first = leaf(methods=[FieldAccessMethod("name", (path(),))])
        second = leaf(methods=[FieldAccessMethod("age", (path("Optional[int]"),))])
        left = first.merge(second)
        right = second.merge(first)
        assert set(left.defined_methods) == set(right.defined_methods)

    def test_merge_is_idempotent(self):
        record = leaf(methods=[FieldAccessMethod("name", (path(),))], dependencies={"Role"})
        assert record.merge(record) == record

    def test_different_owning_type(self):
        with pytest.raises(ClassRedefinitionError, match="Op__Owner"):
            leaf("Op__Owner", "User").merge(leaf("Op__Owner", "Bot"))

    def test_different_variants(self):
        with pytest.raises(ClassRedefinitionError):
            merge_classes(EnumClass("Role", "Role", ("ADMIN",)), leaf("Role", "User"))


# =============================================================================
# ClassRegistry
# =============================================================================


class TestClassRegistry:
    """Tests for ClassRegistry."""

    def test_add_keeps_insertion_order(self):
        registry = ClassRegistry()
        registry.add(leaf("B"))
        registry.add(leaf("A"))
        assert [c.name for c in registry] == ["B", "A"]
        assert "A" in registry
        assert len(registry) == 2

    def test_add_existing_name(self):
        registry = ClassRegistry()
        registry.add(EnumClass("Role", "Role", ("ADMIN",)))
        with pytest.raises(ClassRedefinitionError):
            registry.add(EnumClass("Role", "Role", ("ADMIN",)))

    def test_merge_new_class(self):
        registry = ClassRegistry()
        registry.merge(leaf())
        assert registry.get("Op__User") == leaf()

    def test_merge_replaces_record(self):
        registry = ClassRegistry()
        registry.merge(leaf(methods=[FieldAccessMethod("name", (path(),))]))
        registry.merge(leaf(methods=[FieldAccessMethod("age", (path("Optional[int]"),))]))
        assert [m.name for m in registry.get("Op__User").defined_methods] == ["name", "age"]
        assert len(registry) == 1

    def test_merge_into_non_leaf(self):
        registry = ClassRegistry()
        registry.add(InputClass("Op__User", "UserFilter"))
        with pytest.raises(ClassRedefinitionError):
            registry.merge(leaf())


# =============================================================================
# sort_classes
# =============================================================================


class TestSortClasses:
    """Tests for sort_classes."""

    def test_dependencies_come_first(self):
        classes = [
            leaf("Op", dependencies={"Op__User"}),
            leaf("Op__User", dependencies={"Op__User__Friends", "Role"}),
            leaf("Op__User__Friends"),
            EnumClass("Role", "Role", ("ADMIN",)),
        ]
        order = [c.name for c in sort_classes(classes)]
        for defined_class in classes:
            for dependency in defined_class.dependencies:
                assert order.index(dependency) < order.index(defined_class.name)

    def test_independent_classes_keep_registration_order(self):
        classes = [leaf("C"), leaf("A"), leaf("B")]
        assert [c.name for c in sort_classes(classes)] == ["C", "A", "B"]

    def test_ready_classes_keep_registration_order(self):
        classes = [leaf("A", dependencies={"C"}), leaf("B"), leaf("C")]
        assert [c.name for c in sort_classes(classes)] == ["B", "C", "A"]

    def test_unknown_dependency(self):
        with pytest.raises(GenerationError, match="Missing"):
            sort_classes([leaf("Op", dependencies={"Missing"})])

    def test_cycle(self):
        with pytest.raises(DependencyCycleError) as exc_info:
            sort_classes([leaf("A", dependencies={"B"}), leaf("B", dependencies={"A"})])
        assert set(exc_info.value.cycle) == {"A", "B"}
