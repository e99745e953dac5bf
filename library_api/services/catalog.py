"""
Catalog Data Access Service

Typed accessors for the three catalog entities (Author, Book, User).

Each store is constructed with the SQLAlchemy session of the current
request, so the same code runs against the request session in the API and
against a test session in the test suite.

Stores flush but never commit: the caller owns the unit of work and
decides when to commit or roll back. After a StoreValidationError the
session must be rolled back before it is used again.

Usage:
    from library_api.services.catalog import AuthorStore, BookStore

    author = AuthorStore(db).find_by_name("Robert Martin")
    books = BookStore(db).find_all(genre="refactoring")
    db.commit()
"""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session, selectinload

from library_api.errors import StoreValidationError
from library_api.models import Author, Book, BookGenre, User

logger = logging.getLogger(__name__)


def _require(field: str, value: str | None, column=None) -> None:
    """Reject missing or blank required string fields."""
    if value is None or not value.strip():
        raise StoreValidationError(f"`{field}` is required")
    if column is not None:
        _check_length(field, value, column)


def _check_length(field: str, value: str, column) -> None:
    """Reject values longer than the mapped column allows."""
    max_length = column.type.length
    if max_length is not None and len(value) > max_length:
        raise StoreValidationError(
            f"`{field}` must be at most {max_length} characters long"
        )


def _flush(db: Session) -> None:
    """Flush pending writes, reporting constraint and data errors as validation errors."""
    try:
        db.flush()
    except (IntegrityError, DataError) as e:
        raise StoreValidationError(str(e.orig)) from e


class AuthorStore:
    """Accessors for Author records."""

    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        stmt = select(func.count()).select_from(Author)
        return self.db.execute(stmt).scalar_one()

    def find_all(self) -> Sequence[Author]:
        """All authors, with their books loaded for bookCount."""
        stmt = select(Author).options(selectinload(Author.books)).order_by(Author.id)
        return self.db.execute(stmt).scalars().all()

    def find_by_name(self, name: str) -> Author | None:
        stmt = select(Author).where(Author.name == name)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, name: str) -> Author:
        """
        Persist a new author.

        Raises:
            StoreValidationError: If the name is blank or already taken
        """
        _require("name", name, Author.name)
        if self.find_by_name(name) is not None:
            raise StoreValidationError(f"Author with name '{name}' already exists")

        author = Author(name=name)
        self.db.add(author)
        _flush(self.db)
        logger.info(f"Created author {author.id}: {name}")
        return author

    def update_born(self, name: str, year: int) -> Author | None:
        """
        Set an author's birth year.

        Returns:
            The updated author, or None if no author has that name
        """
        author = self.find_by_name(name)
        if author is None:
            return None

        author.born = year
        _flush(self.db)
        return author

    def delete_all(self) -> int:
        """
        Delete every author.

        Books reference their author with a required foreign key, so the
        authors' books are removed first.

        Returns:
            Number of authors removed
        """
        BookStore(self.db).delete_all()
        result = self.db.execute(delete(Author))
        logger.warning(f"Deleted all authors ({result.rowcount} rows)")
        return result.rowcount


class BookStore:
    """Accessors for Book records."""

    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        stmt = select(func.count()).select_from(Book)
        return self.db.execute(stmt).scalar_one()

    def find_all(
        self,
        author: str | None = None,
        genre: str | None = None,
    ) -> Sequence[Book]:
        """
        Books with their author and genres loaded.

        Args:
            author: Only books whose author's name is exactly this
            genre: Only books whose genre list contains this genre

        Both filters run in the database and combine as an intersection.
        """
        stmt = (
            select(Book)
            .options(selectinload(Book.author), selectinload(Book.genre_entries))
            .order_by(Book.id)
        )

        if author:
            stmt = stmt.join(Book.author).where(Author.name == author)

        if genre:
            stmt = stmt.where(Book.genre_entries.any(BookGenre.name == genre))

        return self.db.execute(stmt).scalars().all()

    def find_by_author_id(self, author_id: int) -> Sequence[Book]:
        stmt = (
            select(Book)
            .options(selectinload(Book.genre_entries))
            .where(Book.author_id == author_id)
            .order_by(Book.id)
        )
        return self.db.execute(stmt).scalars().all()

    def genres(self) -> list[str]:
        """Distinct genres across all books, in order of first appearance."""
        stmt = select(BookGenre.name).order_by(BookGenre.book_id, BookGenre.position)
        names = self.db.execute(stmt).scalars().all()
        return list(dict.fromkeys(names))

    def create(
        self,
        title: str,
        published: int,
        author: Author,
        genres: list[str],
    ) -> Book:
        """
        Persist a new book for an existing (or just-created) author.

        Raises:
            StoreValidationError: If a required field is missing or a value
                is too long for its column
        """
        _require("title", title, Book.title)
        if published is None:
            raise StoreValidationError("`published` is required")
        if author is None:
            raise StoreValidationError("`author` is required")

        genres = list(genres or [])
        for genre in genres:
            _check_length("genres", genre, BookGenre.name)

        book = Book(title=title, published=published, author=author)
        book.genres = genres
        self.db.add(book)
        _flush(self.db)
        logger.info(f"Created book {book.id}: {title}")
        return book

    def delete_all(self) -> int:
        """
        Delete every book and its genre entries.

        Returns:
            Number of books removed
        """
        self.db.execute(delete(BookGenre))
        result = self.db.execute(delete(Book))
        logger.warning(f"Deleted all books ({result.rowcount} rows)")
        return result.rowcount


class UserStore:
    """Accessors for User records."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(
        self,
        username: str,
        favorite_genre: str,
        hashed_password: str,
    ) -> User:
        """
        Persist a new user.

        Raises:
            StoreValidationError: If a required field is blank or the
                username is already taken
        """
        _require("username", username, User.username)
        _require("favoriteGenre", favorite_genre, User.favorite_genre)
        if self.find_by_username(username) is not None:
            raise StoreValidationError(f"Username '{username}' is already taken")

        user = User(
            username=username,
            favorite_genre=favorite_genre,
            hashed_password=hashed_password,
        )
        self.db.add(user)
        _flush(self.db)
        logger.info(f"Created user {user.id}: {username}")
        return user
