"""
Services Package

This package contains the logic that sits below the GraphQL resolvers:
- Separate from request handling (graphql/)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- catalog.py: Data access stores for authors, books and users
- pubsub.py: In-process publish/subscribe for subscription events
- security.py: Password hashing and login tokens
"""
