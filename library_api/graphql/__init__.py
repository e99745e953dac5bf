"""
GraphQL Package

This package provides the catalog's GraphQL API using Strawberry GraphQL.

Features:
- Queries: bookCount, authorCount, allBooks, allAuthors, genres, me
- Mutations: addBook, editAuthor, createUser, login, removeBooks, removeAuthors
- Subscriptions: bookAdded
- Authentication via bearer token in the Authorization header, or in
  the connection_init params of a WebSocket connection

Usage:
    The GraphQL endpoint is available at /graphql (HTTP and WebSocket).

Example Query:
    query {
        allBooks(genre: "refactoring") {
            title
            published
            author { name }
        }
    }
"""

import strawberry
from strawberry.exceptions import ConnectionRejectionError
from strawberry.fastapi import GraphQLRouter

from library_api.config import get_settings
from library_api.errors import AuthenticationError
from library_api.graphql.context import (
    GraphQLContext,
    authenticate_connection_params,
    get_context,
)
from library_api.graphql.mutations import Mutation
from library_api.graphql.queries import Query
from library_api.graphql.subscriptions import Subscription

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


class CatalogGraphQLRouter(GraphQLRouter):
    """GraphQL router that also accepts a bearer token in connection_init."""

    async def on_ws_connect(self, context: GraphQLContext):
        try:
            authenticate_connection_params(context)
        except AuthenticationError as e:
            raise ConnectionRejectionError({"message": e.message}) from e
        return await super().on_ws_connect(context)


def create_graphql_router() -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Returns:
        GraphQLRouter configured with schema and context
    """
    return CatalogGraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=get_settings().graphql_ide,
    )


__all__ = ["schema", "create_graphql_router"]
