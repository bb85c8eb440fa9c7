"""Custom scalar handlers for GraphQL code generation.

Provides a protocol for defining how GraphQL custom scalars map to Python types
and how they're serialized/deserialized.

Generated code calls a handler by its importable class name, so handlers are
plain classes with static ``serialize``/``deserialize`` methods that live at
module level in an importable module.

Example usage:
    from gql_typegen.core.scalars import ScalarRegistry, DateTimeHandler

    # Use built-in handlers
    registry = ScalarRegistry()
    registry.register("Timestamp", DateTimeHandler)

    # Create custom handler (in an importable module, e.g. myapp/scalars.py)
    class MoneyHandler:
        python_type = "Decimal"
        import_statement = "from decimal import Decimal"

        @staticmethod
        def serialize(value):
            return str(value)

        @staticmethod
        def deserialize(value):
            from decimal import Decimal
            return Decimal(value)

    registry.register("Money", MoneyHandler)
"""

from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from .errors import ScalarConverterError


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for custom scalar handlers.

    Implement this protocol to define how a GraphQL scalar maps to Python.

    Attributes:
        python_type: The Python type name (e.g., "datetime", "Decimal")
        import_statement: The import needed for this type (e.g., "from datetime import datetime")
    """

    python_type: str
    import_statement: str

    def serialize(self, value: Any) -> Any:
        """Convert Python value to JSON-serializable format for GraphQL."""
        ...

    def deserialize(self, value: Any) -> Any:
        """Convert JSON value from GraphQL to Python type."""
        ...


class DateTimeHandler:
    """Handler for DateTime scalars using ISO 8601 format."""

    python_type = "datetime"
    import_statement = "from datetime import datetime"

    @staticmethod
    def serialize(value: datetime) -> str:
        """Convert datetime to ISO 8601 string."""
        return value.isoformat()

    @staticmethod
    def deserialize(value: str) -> datetime:
        """Parse ISO 8601 string to datetime."""
        return datetime.fromisoformat(value.replace("Z", "+00:00"))


class DateHandler:
    """Handler for Date scalars using ISO 8601 date format."""

    python_type = "date"
    import_statement = "from datetime import date"

    @staticmethod
    def serialize(value: date) -> str:
        """Convert date to ISO 8601 string."""
        return value.isoformat()

    @staticmethod
    def deserialize(value: str) -> date:
        """Parse ISO 8601 date string."""
        return date.fromisoformat(value)


class UUIDHandler:
    """Handler for UUID scalars."""

    python_type = "UUID"
    import_statement = "from uuid import UUID"

    @staticmethod
    def serialize(value: UUID) -> str:
        """Convert UUID to string."""
        return str(value)

    @staticmethod
    def deserialize(value: str) -> UUID:
        """Parse string to UUID."""
        return UUID(value)


class JSONHandler:
    """Handler for JSON scalars (pass-through)."""

    python_type = "Any"
    import_statement = "from typing import Any"

    @staticmethod
    def serialize(value: Any) -> Any:
        """JSON values are already serializable."""
        return value

    @staticmethod
    def deserialize(value: Any) -> Any:
        """JSON values are already deserialized."""
        return value


# Scalars that convert through a handler even when nothing is registered
BUILTIN_CONVERTERS: dict[str, type] = {
    "Date": DateHandler,
    "ISO8601Date": DateHandler,
    "DateTime": DateTimeHandler,
    "ISO8601DateTime": DateTimeHandler,
}


def converter_reference(scalar_name: str, handler: Any) -> tuple[str, str]:
    """Return how generated code names a handler: (qualified name, import line).

    Raises:
        ScalarConverterError: If the handler is not a module-level class
    """
    if not isinstance(handler, type):
        raise ScalarConverterError(scalar_name, handler)
    module = getattr(handler, "__module__", None)
    qualname = getattr(handler, "__qualname__", "")
    if not module or module == "__main__" or "<locals>" in qualname:
        raise ScalarConverterError(scalar_name, handler)
    top_level = qualname.split(".", 1)[0]
    return qualname, f"from {module} import {top_level}"


class ScalarRegistry:
    """Registry for custom scalar handlers.

    Manages the mapping between GraphQL scalar names and their handlers.

    Example:
        registry = ScalarRegistry()
        registry.register("Timestamp", DateTimeHandler)

        handler = registry.get("Timestamp")
        if handler:
            python_type = handler.python_type  # "datetime"
    """

    def __init__(self):
        self._handlers: dict[str, type] = {}
        # Register default handlers
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in default handlers."""
        self.register("DateTime", DateTimeHandler)
        self.register("Date", DateHandler)
        self.register("UUID", UUIDHandler)
        self.register("JSON", JSONHandler)
        self.register("JSONObject", JSONHandler)

    def register(self, scalar_name: str, handler: type):
        """Register a handler class for a scalar type."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> type | None:
        """Get the handler for a scalar type, or None if not registered."""
        return self._handlers.get(scalar_name)
