"""GraphQL executor used by generated operation classes.

Handles HTTP communication and response parsing. Interpreting the response is
left to the generated classes, which keep partial data alongside errors.
"""

from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


class GraphQLError(Exception):
    """Exception raised for GraphQL errors."""

    def __init__(self, message: str, errors: list[Any]):
        self.message = message
        self.errors = errors
        super().__init__(message)


class GraphQLErrorItem(BaseModel):
    """A single entry of a response's ``errors`` list."""
    model_config = ConfigDict(extra="allow")

    message: str
    locations: Optional[list[dict[str, Any]]] = None
    path: Optional[list[Any]] = None
    extensions: Optional[dict[str, Any]] = None


class GraphQLResponse(BaseModel):
    """The GraphQL response envelope."""
    data: Optional[dict[str, Any]] = None
    errors: Optional[list[GraphQLErrorItem]] = None
    extensions: Optional[dict[str, Any]] = Field(default=None)


class GraphQLExecutor:
    """Executes GraphQL operations against an endpoint.

    Examples:
        async with GraphQLExecutor(url, headers={"Authorization": f"Bearer {token}"}) as executor:
            result = await GetUser.execute(executor, id="1")

        # Raw documents
        response = await executor.execute("{ viewer { id } }")
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            url: GraphQL endpoint URL
            headers: Extra HTTP headers sent with every request (e.g. authorization)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for testing
        """
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self.headers)

            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GraphQLExecutor":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> GraphQLResponse:
        """Execute a raw GraphQL document.

        Args:
            query: GraphQL query string
            variables: Already serialized variables; ``None`` values are omitted
            operation_name: Operation to run when the document holds several

        Returns:
            The parsed response envelope, errors included

        Raises:
            httpx.HTTPStatusError: If the endpoint answers with an HTTP error
        """
        client = await self._get_client()

        payload: dict[str, Any] = {"query": query}
        if operation_name:
            payload["operationName"] = operation_name
        if variables:
            payload["variables"] = self._serialize_variables(variables)

        response = await client.post(self.url, json=payload)
        response.raise_for_status()

        return GraphQLResponse.model_validate(response.json())

    def _serialize_variables(self, variables: dict[str, Any]) -> dict[str, Any]:
        """Drop unset variables so the server applies its defaults."""
        return {key: value for key, value in variables.items() if value is not None}
