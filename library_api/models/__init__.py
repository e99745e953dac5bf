"""
SQLAlchemy Models Package

Model Relationships:
- Author <- Book: One-to-Many (a book has exactly one author,
                  an author has many books)
- Book -> BookGenre: One-to-Many (ordered genre entries of a book)
- User: standalone

Import all models here so they are registered with Base.metadata
(Alembic and create_tables rely on it).
"""

from library_api.models.author import Author
from library_api.models.genre import BookGenre
from library_api.models.book import Book
from library_api.models.user import User

__all__ = [
    "Author",
    "BookGenre",
    "Book",
    "User",
]
