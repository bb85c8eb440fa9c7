"""GraphQL schema and query document loading using graphql-core.

Parses SDL files (or an introspection result) into a ``GraphQLSchema`` and
collects query documents to generate classes from.
"""

import json
import logging
import os
from dataclasses import dataclass

from graphql import DocumentNode, GraphQLSchema, build_ast_schema, build_client_schema, parse

logger = logging.getLogger(__name__)

GRAPHQL_EXTENSIONS = (".graphql", ".graphqls", ".gql")


@dataclass(frozen=True)
class QueryDeclaration:
    """A query document and where it was read from."""
    query_text: str
    source: str = "<string>"


def collect_graphql_files(path: str) -> list[str]:
    """Collect all GraphQL files from a file or directory path."""
    files = []
    if os.path.isfile(path):
        if path.endswith(GRAPHQL_EXTENSIONS):
            files.append(path)
    else:
        for root, _, filenames in os.walk(path):
            for filename in filenames:
                if filename.endswith(GRAPHQL_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)


class SchemaParser:
    """Builds a schema from SDL files or an introspection JSON file."""

    def __init__(self, schema_path: str):
        """Initialize a parser with a path to a schema file or directory."""
        self.schema_path = schema_path
        self.current_file = ""

    def parse_all(self) -> GraphQLSchema:
        """Parse all schema files and return the built schema."""
        if os.path.isfile(self.schema_path) and self.schema_path.endswith(".json"):
            return self._parse_introspection()

        schema_files = collect_graphql_files(self.schema_path)
        if not schema_files:
            raise FileNotFoundError(f"No GraphQL schema files found at {self.schema_path}")

        definitions = []
        for file_path in schema_files:
            self.current_file = os.path.basename(file_path)
            with open(file_path) as f:
                content = f.read()
                try:
                    ast = parse(content)
                except Exception:
                    logger.error("Error parsing %s", self.current_file)
                    raise
            definitions.extend(ast.definitions)

        logger.debug("Building schema from %d file(s)", len(schema_files))
        return build_ast_schema(DocumentNode(definitions=tuple(definitions)))

    def _parse_introspection(self) -> GraphQLSchema:
        """Build the schema from a saved introspection query result."""
        self.current_file = os.path.basename(self.schema_path)
        with open(self.schema_path) as f:
            data = json.load(f)
        return build_client_schema(data.get("data", data))


def load_query_declarations(path: str) -> list[QueryDeclaration]:
    """Read every query document under path, in sorted file order."""
    declarations = []
    for file_path in collect_graphql_files(path):
        with open(file_path) as f:
            declarations.append(QueryDeclaration(f.read(), file_path))
    if not declarations:
        logger.warning("No query documents found at %s", path)
    return declarations
