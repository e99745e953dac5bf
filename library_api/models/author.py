"""
Author Model

Represents an author in the catalog.

Authors are created lazily: the first book that names an unknown author
creates the author record in the same transaction.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many, the back-reference of Book.author. The book row
      owns the association; this side is derived from it, so it can't drift
      out of sync with the books that actually exist.

    Indexes:
    - name: Unique, authors are looked up by exact name

    Example:
        author = Author(name="Robert Martin", born=1952)
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Author's full name, unique within the catalog"
    )

    born: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Birth year"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # Ordered by id so the back-reference lists books in creation order
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
        order_by="Book.id",
    )

    @property
    def book_count(self) -> int:
        """Number of books in the back-reference."""
        return len(self.books)

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
