"""
GraphQL Author Type

Defines the Author type for GraphQL queries.
"""

import strawberry


@strawberry.type(name="Author")
class AuthorType:
    """
    GraphQL type representing a book author.

    Maps to the Author SQLAlchemy model. book_count is the size of the
    author's book back-reference at the time the object was built.
    """

    id: strawberry.ID
    name: str
    born: int | None = None
    book_count: int | None = None
