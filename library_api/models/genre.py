"""
Book Genre Model

Genres are free-form strings attached to a book. Each genre of a book is
stored as its own row with a position, which keeps the book's genre list
in the order it was given and lets the database answer "books in genre X"
without loading every book.

Duplicates within one book are tolerated, so the table uses a surrogate
primary key rather than (book_id, name).
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class BookGenre(Base):
    """
    One genre entry of a book.

    Table: book_genres

    Indexes:
    - name: For genre membership filters
    - book_id: For loading a book's genres
    """

    __tablename__ = "book_genres"

    id: Mapped[int] = mapped_column(primary_key=True)

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Index of the genre within the book's genre list"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Genre name"
    )

    book: Mapped["Book"] = relationship("Book", back_populates="genre_entries")

    def __repr__(self) -> str:
        return f"BookGenre(book_id={self.book_id}, name='{self.name}')"
