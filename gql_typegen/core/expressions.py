"""Expression trees for generated (de)serialization code.

The wrapper algebra in :mod:`.wrappers` builds these trees; the functions here
turn them into Python source. Templates use the ``raw_value`` placeholder for
the value being converted.
"""

import re
from dataclasses import dataclass
from typing import Union

PLACEHOLDER = "raw_value"

_PLACEHOLDER_RE = re.compile(rf"\b{PLACEHOLDER}\b")


def substitute(template: str, variable: str) -> str:
    """Replace every placeholder reference in template with variable."""
    return _PLACEHOLDER_RE.sub(lambda _match: variable, template)


# =============================================================================
# Output side: raw response value -> Python value
# =============================================================================


@dataclass(frozen=True)
class Deserialize:
    """Core conversion of a single bare value.

    ``variable`` is set only at the top level, where the placeholder must be
    bound to the real field access. Inside a map body the placeholder already
    names the bound element.
    """
    template: str
    variable: str | None = None


@dataclass(frozen=True)
class NilGuard:
    """Stop converting when ``variable`` is ``None``.

    At the top level this is an early ``return None``; inside a map body the
    element itself becomes ``None``.
    """
    variable: str
    body: "OutputExpression"
    nested: bool = False


@dataclass(frozen=True)
class MapEach:
    """Convert every element of ``source``, binding each one to ``item``."""
    source: str
    item: str
    body: "OutputExpression"


OutputExpression = Union[Deserialize, NilGuard, MapEach]


def render_expression(expression: OutputExpression) -> str:
    """Render an output expression as a single Python expression."""
    if isinstance(expression, Deserialize):
        if expression.variable is None:
            return expression.template
        return substitute(expression.template, expression.variable)
    if isinstance(expression, NilGuard):
        return (
            f"None if {expression.variable} is None "
            f"else {render_expression(expression.body)}"
        )
    if isinstance(expression, MapEach):
        return (
            f"[{render_expression(expression.body)} "
            f"for {expression.item} in {expression.source}]"
        )
    raise TypeError(f"Unknown expression node: {expression!r}")


def render_statements(expression: OutputExpression) -> list[str]:
    """Render an output expression as the statement lines of an accessor body."""
    if isinstance(expression, NilGuard) and not expression.nested:
        return [
            f"if {expression.variable} is None:",
            "    return None",
            *render_statements(expression.body),
        ]
    return [f"return {render_expression(expression)}"]


# =============================================================================
# Input side: Python value -> JSON-ready variable value
# =============================================================================


@dataclass(frozen=True)
class Serialize:
    """Core serialization of a single bare value."""
    template: str


@dataclass(frozen=True)
class SerializeIfPresent:
    """Serialize only when the value is not ``None``."""
    body: "InputExpression"


@dataclass(frozen=True)
class SerializeEach:
    """Serialize every element, binding each one to ``item``."""
    item: str
    body: "InputExpression"


InputExpression = Union[Serialize, SerializeIfPresent, SerializeEach]


def render_serializer(expression: InputExpression) -> str:
    """Render an input expression, still referring to the placeholder."""
    if isinstance(expression, Serialize):
        return expression.template
    if isinstance(expression, SerializeIfPresent):
        inner = render_serializer(expression.body)
        if inner == PLACEHOLDER:
            return inner
        return f"None if {PLACEHOLDER} is None else {inner}"
    if isinstance(expression, SerializeEach):
        inner = render_serializer(expression.body)
        if inner == PLACEHOLDER:
            return f"list({PLACEHOLDER})"
        return f"[{substitute(inner, expression.item)} for {expression.item} in {PLACEHOLDER}]"
    raise TypeError(f"Unknown expression node: {expression!r}")
