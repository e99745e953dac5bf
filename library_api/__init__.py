"""
Library Catalog API Application Package

A GraphQL API for a library catalog of authors, books and users.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- errors.py: Errors reported to GraphQL clients
- main.py: FastAPI application factory and configuration
- models/: SQLAlchemy ORM models
- services/: Data access, security and pubsub services
- graphql/: Strawberry schema, context and resolvers
"""

__version__ = "0.1.0"
