"""
Services Module

Stores backing the REST API:
- CredentialStore: user registration, lookup and login checks
- GroupStore: groups, members and message logs
"""
from .credentials import (
    CredentialStore,
    DuplicateEmailError,
    InvalidPasswordError,
    UserNotFoundError,
    normalize_email,
)
from .groups import (
    GroupNotFoundError,
    GroupStore,
)
