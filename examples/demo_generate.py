#!/usr/bin/env python3
"""Demonstration of generated result classes.

This script shows how to:
1. Build a schema and generate classes for a query document
2. Load the generated module
3. Read a response through the typed accessors

Note: This demo doesn't make real API calls - the response is a literal
payload shaped like a server answer.
"""

from graphql import build_schema

from gql_typegen.core import CodeGenerator

SCHEMA = """
scalar DateTime

enum Status { ACTIVE SUSPENDED }

interface Node { id: ID! }

type User implements Node {
  id: ID!
  login: String!
  status: Status!
  createdAt: DateTime
}

type Team implements Node {
  id: ID!
  name: String!
  members: [User!]!
}

type Query {
  node(id: ID!): Node
}
"""

QUERY = """
query GetNode($id: ID!) {
  node(id: $id) {
    id
    ... on User { login status createdAt }
    ... on Team { name members { login } }
  }
}
"""


def main():
    print("=== gql-typegen Demo ===\n")

    print("1. Generating classes...")
    generator = CodeGenerator(build_schema(SCHEMA))
    generator.generate(QUERY)
    for name in generator.classes:
        print(f"   {name}")

    code = generator.contents()
    print(f"\n2. Generated module ({len(code.splitlines())} lines):\n")
    print(code)

    namespace = {}
    exec(compile(code, "<generated>", "exec"), namespace)
    GetNode = namespace["GetNode"]

    print("3. Reading a response...")
    result = GetNode.from_response(
        {
            "data": {
                "node": {
                    "__typename": "Team",
                    "id": "t1",
                    "name": "Platform",
                    "members": [{"__typename": "User", "login": "ada"}],
                }
            }
        }
    )
    team = result.node
    print(f"   {team.typename} {team.id}: {team.name}")
    print(f"   Members: {[member.login for member in team.members]}")
    print(f"   Status (User only): {team.status}")


if __name__ == "__main__":
    main()
