"""Registry of generated classes and their emission order."""

import logging
from graphlib import CycleError, TopologicalSorter

from .errors import ClassRedefinitionError, DependencyCycleError, GenerationError
from .ir import DefinedClass, merge_classes

logger = logging.getLogger(__name__)


class ClassRegistry:
    """Generated classes by name, in the order they were first registered."""

    def __init__(self):
        self._classes: dict[str, DefinedClass] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._classes

    def __iter__(self):
        return iter(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    def get(self, name: str) -> DefinedClass | None:
        return self._classes.get(name)

    def add(self, defined_class: DefinedClass) -> DefinedClass:
        """Register a class whose name must not be taken yet."""
        if defined_class.name in self._classes:
            raise ClassRedefinitionError(defined_class.name, "class is already defined")
        logger.debug("Registered %s %s", type(defined_class).__name__, defined_class.name)
        self._classes[defined_class.name] = defined_class
        return defined_class

    def merge(self, defined_class: DefinedClass) -> DefinedClass:
        """Register a class, merging it into an existing one of the same name."""
        existing = self._classes.get(defined_class.name)
        if existing is None:
            return self.add(defined_class)
        merged = merge_classes(existing, defined_class)
        logger.debug("Merged selections into %s", merged.name)
        self._classes[merged.name] = merged
        return merged


def sort_classes(classes) -> list[DefinedClass]:
    """Order classes so each one follows everything it depends on.

    Classes that become ready together keep registration order.

    Raises:
        GenerationError: If a class depends on a name that was never registered
        DependencyCycleError: If the dependencies form a cycle
    """
    by_name = {defined_class.name: defined_class for defined_class in classes}
    sorter = TopologicalSorter()
    for name in by_name:
        sorter.add(name)
    for name, defined_class in by_name.items():
        missing = [dep for dep in defined_class.dependencies if dep not in by_name]
        if missing:
            raise GenerationError(
                f"{name} depends on undefined classes: {', '.join(sorted(missing))}"
            )
        sorter.add(name, *sorted(defined_class.dependencies))

    try:
        order = list(sorter.static_order())
    except CycleError as e:
        raise DependencyCycleError(list(e.args[1])) from e
    return [by_name[name] for name in order]
