# tripchat/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- pubsub: WebSocket broadcasting of group messages
- security: Password hashing and JWT access tokens
"""
