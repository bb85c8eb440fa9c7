"""Shared fixtures for the test suite."""

import pytest
from graphql import build_schema

SCHEMA_SDL = """
scalar BigInt
scalar Date
scalar DateTime
scalar JSON

enum Role {
  ADMIN
  MEMBER
}

interface Node {
  id: ID!
}

type User implements Node {
  id: ID!
  name: String!
  age: Int
  role: Role
  friends: [User!]
  bestFriend: User
  owner: User
  matrix: [[Int]!]
  joinedOn: Date
  lastSeen: DateTime
  balance: BigInt
  metadata: JSON
  score: Float
  active: Boolean!
}

type Bot implements Node {
  id: ID!
  name: String!
  model: String
  creator: User
  owner: Bot
}

union Actor = User | Bot

input UserFilter {
  role: Role
  name: String
  ids: [ID!]
  createdAfter: DateTime
  parent: UserFilter
}

type Query {
  user(id: ID): User
  users(filter: UserFilter): [User!]!
  node(id: ID!): Node
  actor: Actor
}

type Mutation {
  updateUser(id: ID!, name: String, roles: [Role!]): User
}
"""


@pytest.fixture
def schema():
    """The schema most tests generate against."""
    return build_schema(SCHEMA_SDL)
