"""
GraphQL Types Package

GraphQL type definitions that map to our SQLAlchemy models, defined with
Strawberry's decorator syntax.

Types defined here:
- BookType: Book with its author and genres
- AuthorType: Author with book count
- UserType: Public user information
- TokenType: Login result
"""

from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "UserType",
    "TokenType",
]
