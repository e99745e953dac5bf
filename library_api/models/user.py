"""
User Model

Represents an account that can log in and mutate the catalog.

Accounts are created once via the createUser mutation and are never
updated or deleted through the API.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class User(Base):
    """
    User model representing registered users.

    Table: users

    Each account stores its own salted password hash; login verifies the
    supplied password against that hash.

    Indexes:
    - username: Unique index for login lookups

    Example:
        user = User(
            username="mluukkai",
            favorite_genre="refactoring",
            hashed_password=hash_password("secret"),
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique login name"
    )

    favorite_genre: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Genre used by clients for recommendations"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted password hash"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username='{self.username}')"
