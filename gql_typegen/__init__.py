"""Typed Python result classes generated from GraphQL queries."""

__version__ = "0.1.0"
