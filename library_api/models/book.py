"""
Book Model

The central model of the catalog.

A book belongs to exactly one author (Book.author_id is the owning foreign
key) and carries an ordered list of genre strings stored in book_genres.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base
from library_api.models.genre import BookGenre

if TYPE_CHECKING:
    from library_api.models.author import Author


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (required)
    - published: Publication year (required)
    - author_id: Owning reference to the author (required)

    Relationships:
    - author: Many-to-One
    - genre_entries: One-to-Many, ordered by position

    Example:
        book = Book(title="Clean Code", published=2008, author=author)
        book.genres = ["refactoring", "agile"]
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    published: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of publication"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    author: Mapped["Author"] = relationship("Author", back_populates="books")

    genre_entries: Mapped[list[BookGenre]] = relationship(
        BookGenre,
        back_populates="book",
        order_by=BookGenre.position,
        cascade="all, delete-orphan",
    )

    @property
    def genres(self) -> list[str]:
        """Genre names in the order they were given."""
        return [entry.name for entry in self.genre_entries]

    @genres.setter
    def genres(self, names: list[str]) -> None:
        self.genre_entries = [
            BookGenre(position=position, name=name)
            for position, name in enumerate(names)
        ]

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', published={self.published})"
