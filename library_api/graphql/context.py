"""
GraphQL Context

Provides request context to all GraphQL resolvers including:
- Database session for queries
- Current authenticated user (if any)
- PubSub used to publish and subscribe to catalog events

The context is created fresh for each GraphQL request (or subscription
connection) and passed to all resolvers via the `info` parameter.
"""

import logging
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, WebSocket, WebSocketException, status
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from library_api.database import get_db
from library_api.errors import AuthenticationError
from library_api.services.pubsub import PubSub, get_pubsub
from library_api.services.security import (
    parse_authorization_header,
    resolve_current_user,
)

if TYPE_CHECKING:
    from library_api.models.user import User

logger = logging.getLogger(__name__)


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Inherits from Strawberry's BaseContext for proper integration.

    Attributes:
        db: SQLAlchemy database session
        pubsub: Event registry for the bookAdded subscription
        user: Currently authenticated user (None if anonymous)
        connection_params: Payload of a WebSocket connection_init message
    """

    def __init__(self, db: Session, pubsub: PubSub, user: "User | None" = None):
        super().__init__()
        self.db = db
        self.pubsub = pubsub
        self.user = user
        self.connection_params = None


async def get_context(
    request: Request = None,
    websocket: WebSocket = None,
    db: Session = Depends(get_db),
    pubsub: PubSub = Depends(get_pubsub),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    This function is a FastAPI dependency called by Strawberry for every
    GraphQL request and every subscription connection. It extracts the
    bearer token from the Authorization header and resolves the caller.

    A missing header means an anonymous caller. A header carrying an invalid
    token rejects the whole request before any resolver runs.

    For WebSocket connections the session is closed once the caller is
    resolved, so an open subscription does not pin a pooled connection.

    Returns:
        GraphQLContext with db session, pubsub and optional user
    """
    connection = request if request is not None else websocket
    token = parse_authorization_header(connection.headers.get("Authorization"))

    try:
        user = resolve_current_user(db, token)
    except AuthenticationError as e:
        if websocket is not None:
            raise WebSocketException(
                code=status.WS_1008_POLICY_VIOLATION,
                reason=e.message,
            ) from e
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    if websocket is not None:
        # The session lives as long as the socket; give its connection back
        # to the pool instead of holding it for the whole subscription.
        db.close()

    if user is not None:
        logger.debug(f"GraphQL request as user {user.id}")

    return GraphQLContext(db=db, pubsub=pubsub, user=user)


def authenticate_connection_params(context: GraphQLContext) -> None:
    """
    Resolve the caller from a WebSocket ``connection_init`` payload.

    Browser WebSocket clients cannot set handshake headers, so they send
    ``{"Authorization": "Bearer <token>"}`` as connection params instead.
    A caller already resolved from the handshake headers is kept.

    Raises:
        AuthenticationError: If the params carry an invalid token
    """
    params = context.connection_params
    if context.user is not None or not isinstance(params, dict):
        return

    value = params.get("Authorization") or params.get("authorization")
    token = parse_authorization_header(value)
    try:
        context.user = resolve_current_user(context.db, token)
    finally:
        context.db.close()

    if context.user is not None:
        logger.debug(f"WebSocket connection as user {context.user.id}")
