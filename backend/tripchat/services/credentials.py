# tripchat/services/credentials.py
"""
Credential store: registration and lookup of user accounts.

Emails are the user identity and are always stripped and lowercased before
they touch the database, so lookups are case-insensitive. Argon2 hashing is
CPU bound and runs in the default executor to keep the event loop free.
"""
import asyncio
import logging
import uuid
from tortoise.exceptions import IntegrityError

from tripchat.core.security import hash_password, verify_password
from tripchat.models.user import User

logger = logging.getLogger("uvicorn.error")


class DuplicateEmailError(Exception):
    """An account with this (normalized) email already exists."""


class UserNotFoundError(Exception):
    """No account matches the email or id."""


class InvalidPasswordError(Exception):
    """The password does not match the stored hash."""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CredentialStore:
    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create a user account.

        Raises:
            DuplicateEmailError: If the normalized email is already registered
        """
        email = normalize_email(email)
        if await User.exists(email=email):
            raise DuplicateEmailError(email)
        loop = asyncio.get_running_loop()
        password_hash = await loop.run_in_executor(None, hash_password, password)
        try:
            user = await User.create(name=name, email=email, password_hash=password_hash)
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            raise DuplicateEmailError(email) from e
        logger.info("[auth] registered user id=%s email=%s", user.id, user.email)
        return user

    async def find_by_email(self, email: str) -> User | None:
        return await User.get_or_none(email=normalize_email(email))

    async def find_by_id(self, user_id: str) -> User | None:
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            return None
        return await User.get_or_none(id=user_id)

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check a login attempt.

        Raises:
            UserNotFoundError: If no account has this email
            InvalidPasswordError: If the password is wrong
        """
        user = await self.find_by_email(email)
        if user is None:
            raise UserNotFoundError(normalize_email(email))
        loop = asyncio.get_running_loop()
        ok = await loop.run_in_executor(None, verify_password, password, user.password_hash)
        if not ok:
            raise InvalidPasswordError(user.email)
        return user
