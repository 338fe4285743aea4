# tripchat/models/user.py
"""
Database model for users.
Represents a registered account: display name, unique email and password hash.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Security:
    - Password is stored as an Argon2 hash (never store plain text passwords)
    - Email is stored lowercased and must be unique; it is the user's identity
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    name = fields.CharField(max_length=256)  # Display name
    email = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # Lowercased email (unique, indexed for login lookups)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def to_public(self) -> dict:
        """User fields safe to return to clients (no password hash)."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
