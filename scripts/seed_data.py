#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample authors, books and a user for
development.

USAGE:
    # From the project root with the virtualenv active
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Drops and recreates the tables (unless told to keep existing data)
3. Creates sample authors, books and one user through the catalog stores
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.database import SessionLocal, create_tables, drop_tables
from library_api.services.catalog import AuthorStore, BookStore, UserStore
from library_api.services.security import hash_password

AUTHORS = [
    {"name": "Robert Martin", "born": 1952},
    {"name": "Martin Fowler", "born": 1963},
    {"name": "Fyodor Dostoevsky", "born": 1821},
    {"name": "Joshua Kerievsky", "born": None},
    {"name": "Sandi Metz", "born": None},
]

BOOKS = [
    {
        "title": "Clean Code",
        "published": 2008,
        "author": "Robert Martin",
        "genres": ["refactoring"],
    },
    {
        "title": "Agile software development",
        "published": 2002,
        "author": "Robert Martin",
        "genres": ["agile", "patterns", "design"],
    },
    {
        "title": "Refactoring, edition 2",
        "published": 2018,
        "author": "Martin Fowler",
        "genres": ["refactoring"],
    },
    {
        "title": "Refactoring to patterns",
        "published": 2008,
        "author": "Joshua Kerievsky",
        "genres": ["refactoring", "patterns"],
    },
    {
        "title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
        "published": 2012,
        "author": "Sandi Metz",
        "genres": ["refactoring", "design"],
    },
    {
        "title": "Crime and punishment",
        "published": 1866,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "crime"],
    },
    {
        "title": "Demons",
        "published": 1872,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "revolution"],
    },
]


def create_catalog(db: Session) -> None:
    """Create sample authors and their books."""
    print("Creating authors...")
    authors = AuthorStore(db)
    by_name = {}
    for data in AUTHORS:
        author = authors.create(data["name"])
        if data["born"] is not None:
            authors.update_born(data["name"], data["born"])
        by_name[data["name"]] = author

    print("Creating books...")
    books = BookStore(db)
    for data in BOOKS:
        books.create(
            title=data["title"],
            published=data["published"],
            author=by_name[data["author"]],
            genres=data["genres"],
        )

    db.commit()
    print(f"Created {len(AUTHORS)} authors and {len(BOOKS)} books.")


def create_demo_user(db: Session) -> None:
    """Create a demo account unless it already exists."""
    users = UserStore(db)
    if users.find_by_username("mluukkai") is not None:
        return

    users.create(
        username="mluukkai",
        favorite_genre="refactoring",
        hashed_password=hash_password(get_settings().default_user_password),
    )
    db.commit()
    print("Created user 'mluukkai' with the default password.")


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, drops all tables (users included) before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    if clear_existing:
        print("Dropping existing tables...")
        drop_tables()
    create_tables()

    db = SessionLocal()
    try:
        create_catalog(db)
        create_demo_user(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print(f"\nGraphQL endpoint at http://localhost:{get_settings().port}/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
