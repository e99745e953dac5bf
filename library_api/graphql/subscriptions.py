"""
GraphQL Subscription Resolvers

Subscriptions are served over WebSocket (graphql-transport-ws and
graphql-ws protocols) on the same /graphql endpoint.
"""

from collections.abc import AsyncGenerator
from contextlib import aclosing

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.book import BookType
from library_api.services.pubsub import Topic


@strawberry.type
class Subscription:
    """GraphQL Subscription type."""

    @strawberry.subscription(description="Books added after the client subscribed")
    async def book_added(
        self,
        info: Info[GraphQLContext, None],
    ) -> AsyncGenerator[BookType, None]:
        async with aclosing(info.context.pubsub.subscribe(Topic.BOOK_ADDED)) as events:
            async for book in events:
                yield book
