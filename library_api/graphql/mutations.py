"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.

Editing the catalog (addBook, editAuthor) requires a logged-in caller.
Account creation, login and the bulk removals are open to anyone.

Every mutation is one unit of work on the request session: it commits
once on success and rolls back on any store validation error.
"""

import logging

import strawberry
from strawberry.types import Info

from library_api.config import get_settings
from library_api.errors import AuthenticationError, StoreValidationError, ValidationError
from library_api.graphql.context import GraphQLContext
from library_api.graphql.queries import author_to_graphql, book_to_graphql, user_to_graphql
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType
from library_api.models.user import User
from library_api.services.catalog import AuthorStore, BookStore, UserStore
from library_api.services.pubsub import Topic
from library_api.services.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)

# Value returned by the bulk removal mutations, whatever was removed
REMOVED_SENTINEL = 666


def require_auth(info: Info[GraphQLContext, None]) -> User:
    """Helper to require authentication and return the user."""
    user = info.context.user
    if user is None:
        raise AuthenticationError("not authenticated")
    return user


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.
    """

    # =========================================================================
    # Catalog Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating its author if needed")
    def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        author: str,
        published: int,
        genres: list[str],
    ) -> BookType:
        """
        Add a book by author name.

        The author is looked up by exact name and created when missing. The
        author and the book are written in the same transaction, so a
        failure leaves neither behind.

        On success the populated book is published to bookAdded subscribers.

        Requires authentication.
        """
        require_auth(info)
        db = info.context.db
        invalid_args = {
            "title": title,
            "author": author,
            "published": published,
            "genres": genres,
        }

        authors = AuthorStore(db)
        try:
            book_author = authors.find_by_name(author)
            if book_author is None:
                book_author = authors.create(author)

            book = BookStore(db).create(
                title=title,
                published=published,
                author=book_author,
                genres=genres,
            )
            db.commit()
        except StoreValidationError as e:
            db.rollback()
            raise ValidationError(str(e), invalid_args=invalid_args) from e

        result = book_to_graphql(book)
        info.context.pubsub.publish(Topic.BOOK_ADDED, result)
        return result

    @strawberry.mutation(description="Set an author's birth year")
    def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: int,
    ) -> AuthorType | None:
        """
        Update an author's birth year.

        Returns None (not an error) when no author has the given name.

        Requires authentication.
        """
        require_auth(info)
        db = info.context.db

        author = AuthorStore(db).update_born(name, set_born_to)
        if author is None:
            return None

        db.commit()
        return author_to_graphql(author)

    @strawberry.mutation(description="Delete every book")
    def remove_books(self, info: Info[GraphQLContext, None]) -> int | None:
        db = info.context.db
        BookStore(db).delete_all()
        db.commit()
        return REMOVED_SENTINEL

    @strawberry.mutation(description="Delete every author and their books")
    def remove_authors(self, info: Info[GraphQLContext, None]) -> int | None:
        db = info.context.db
        AuthorStore(db).delete_all()
        db.commit()
        return REMOVED_SENTINEL

    # =========================================================================
    # Account Mutations
    # =========================================================================

    @strawberry.mutation(description="Register a new user account")
    def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        favorite_genre: str,
        password: str | None = None,
    ) -> UserType | None:
        """
        Create a new user account.

        Accounts created without a password get the configured default
        password, so clients written against the password-less signature
        keep working.
        """
        db = info.context.db
        if password is None:
            password = get_settings().default_user_password

        try:
            user = UserStore(db).create(
                username=username,
                favorite_genre=favorite_genre,
                hashed_password=hash_password(password),
            )
            db.commit()
        except StoreValidationError as e:
            db.rollback()
            raise ValidationError(
                str(e),
                invalid_args={"username": username, "favoriteGenre": favorite_genre},
            ) from e

        return user_to_graphql(user)

    @strawberry.mutation(description="Login with username and password")
    def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> TokenType | None:
        """
        Authenticate with username and password.

        Returns a signed token on success. An unknown username and a wrong
        password fail with the same error.
        """
        user = UserStore(info.context.db).find_by_username(username)

        if user is None or not verify_password(password, user.hashed_password):
            logger.info(f"Failed login for '{username}'")
            raise ValidationError("wrong credentials")

        return TokenType(value=issue_token(user))
