# tripchat/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: User account and credentials
- Group: Trip group
- GroupMember: Member email of a group
- GroupMessage: Message posted to a group
- Trip: Trip planned by a user
"""
from .user import User
from .group import Group, GroupMember, GroupMessage
from .trip import Trip
