"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver reads through the catalog stores using the context session.
"""

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import UserType
from library_api.models import Author, Book, User
from library_api.services.catalog import AuthorStore, BookStore


def author_to_graphql(author: Author) -> AuthorType:
    """Convert SQLAlchemy Author model to GraphQL AuthorType."""
    return AuthorType(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
        book_count=author.book_count,
    )


def book_to_graphql(book: Book) -> BookType:
    """Convert SQLAlchemy Book model to GraphQL BookType, author populated."""
    return BookType(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        author=author_to_graphql(book.author),
        genres=book.genres,
    )


def user_to_graphql(user: User) -> UserType:
    """Convert SQLAlchemy User model to GraphQL UserType."""
    return UserType(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with database session and current user.
    """

    @strawberry.field(description="Number of books in the catalog")
    def book_count(self, info: Info[GraphQLContext, None]) -> int | None:
        return BookStore(info.context.db).count()

    @strawberry.field(description="Number of authors in the catalog")
    def author_count(self, info: Info[GraphQLContext, None]) -> int | None:
        return AuthorStore(info.context.db).count()

    @strawberry.field(description="Books, optionally filtered by author name and genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType] | None:
        """
        Get books with optional filtering.

        Args:
            author: Only books by the author with exactly this name
            genre: Only books listing this genre

        Returns:
            Matching books with their authors; both filters apply together
        """
        books = BookStore(info.context.db).find_all(author=author, genre=genre)
        return [book_to_graphql(b) for b in books]

    @strawberry.field(description="All authors with their book counts")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType] | None:
        authors = AuthorStore(info.context.db).find_all()
        return [author_to_graphql(a) for a in authors]

    @strawberry.field(description="Distinct genres across all books")
    def genres(self, info: Info[GraphQLContext, None]) -> list[str] | None:
        """Genres in order of first appearance, without duplicates."""
        return BookStore(info.context.db).genres()

    @strawberry.field(description="The currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        """
        Get the authenticated user's profile.

        Returns None for anonymous requests rather than an error.
        """
        user = info.context.user
        if user is None:
            return None
        return user_to_graphql(user)
