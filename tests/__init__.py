"""
Test Suite for Library Catalog API

Test Organization:
- conftest.py: Shared fixtures (test database, client, pubsub, sample data)
- test_catalog.py: Tests for the author, book and user stores
- test_security.py: Tests for password hashing and login tokens
- test_pubsub.py: Tests for the event registry
- test_graphql.py: Tests for queries and mutations over HTTP
- test_websocket.py: Tests for GraphQL over WebSocket (auth, connection use)
- test_subscriptions.py: Tests for the bookAdded subscription

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_graphql.py

    # Run with verbose output
    pytest -v
"""
