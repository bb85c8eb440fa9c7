"""Base classes for generated code.

Generated accessor classes subclass these and read straight from the raw
response payload; nothing is converted until an accessor is called.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .executor import GraphQLError, GraphQLErrorItem, GraphQLResponse

# Value of a custom scalar that has no registered handler
ScalarValue = Union[str, int, float, bool, Dict[str, Any], List[Any], None]


class UnexpectedTypenameError(Exception):
    """An accessor has no path for the runtime type of the object."""

    def __init__(self, class_name: str, typename: str | None):
        super().__init__(f"{class_name} cannot read objects of type {typename!r}")
        self.class_name = class_name
        self.typename = typename


class QueryResult:
    """Typed view over one raw response object."""

    def __init__(self, raw_result: Dict[str, Any]):
        self._raw_result = raw_result

    @property
    def raw_result(self) -> Dict[str, Any]:
        return self._raw_result

    @property
    def typename(self) -> Optional[str]:
        return self._raw_result.get("__typename")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._raw_result == other._raw_result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw_result!r})"


class OperationResult(QueryResult):
    """Typed view over the ``data`` of an operation response."""

    OPERATION_NAME: str = ""
    OPERATION_TYPE: str = ""
    QUERY_TEXT: str = ""

    def __init__(
        self,
        data: Dict[str, Any],
        errors: Optional[List[GraphQLErrorItem]] = None,
    ):
        super().__init__(data)
        self._errors = list(errors or [])

    @property
    def errors(self) -> List[GraphQLErrorItem]:
        return self._errors

    @classmethod
    def from_response(cls, response: Union[GraphQLResponse, Dict[str, Any]]):
        """Build the result from a response envelope.

        Partial data is kept together with its errors.

        Raises:
            GraphQLError: If the response carries no data
        """
        if not isinstance(response, GraphQLResponse):
            response = GraphQLResponse.model_validate(response)
        errors = response.errors or []
        if response.data is None:
            messages = "; ".join(e.message for e in errors) or "no data returned"
            raise GraphQLError(f"GraphQL errors: {messages}", errors)
        return cls(response.data, errors)

    @classmethod
    async def execute(cls, executor, **variables):
        raise NotImplementedError(f"{cls.__name__} does not define an operation")


class InputObject:
    """Base class of generated input object classes."""

    def serialize(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"{type(self).__name__}({fields})"


class GraphQLEnum(str, Enum):
    """Base class of generated enum classes."""

    @classmethod
    def deserialize(cls, value: str):
        return cls(value)

    def serialize(self) -> str:
        return self.value
