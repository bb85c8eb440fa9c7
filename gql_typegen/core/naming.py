"""Naming conventions shared by the generator and the renderer."""

import re

from .errors import InvalidIdentifierError

# Python reserved keywords that cannot be used as parameter or member names
PYTHON_KEYWORDS = {
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield'
}

OPERATION_NAME_PATTERN = re.compile(r"\A[A-Z][a-zA-Z0-9_]+\Z")


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word.capitalize() for word in snake_case(name).split("_"))


def safe_param_name(name: str) -> str:
    """Make a name safe for Python by suffixing keywords with underscore."""
    if name in PYTHON_KEYWORDS:
        return f"{name}_"
    return name


def module_name(class_name: str) -> str:
    """Module name used for a class when writing one file per class.

    Path segments stay separated by a double underscore, e.g.
    ``GetUser__BestFriend`` becomes ``get_user__best_friend``.
    """
    return "__".join(snake_case(part) for part in class_name.split("__"))


def ensure_operation_name(name: str | None) -> str:
    """Return name if it can be used as a root class name, else raise."""
    if name is None or not OPERATION_NAME_PATTERN.match(name):
        raise InvalidIdentifierError(name)
    return name


def type_class_name(type_name: str) -> str:
    """Class name for an enum or input object type.

    Introspection types (``__TypeKind``) are renamed so references to them are
    not mangled inside generated class bodies.
    """
    if type_name.startswith("__"):
        return f"Introspection{type_name[2:]}"
    return type_name
