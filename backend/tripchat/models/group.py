# tripchat/models/group.py
"""
Database models for groups.
A group document is split into the group row, its member emails and its
message log; the API always returns them embedded in one group object.
"""
import uuid
from tortoise import fields, models

class Group(models.Model):
    """
    Group database model.

    Relationships:
    - Has many GroupMember rows (related_name="members")
    - Has many GroupMessage rows (related_name="messages")
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "groups"

class GroupMember(models.Model):
    id = fields.IntField(pk=True)
    group = fields.ForeignKeyField("models.Group", related_name="members", on_delete=fields.CASCADE)
    email = fields.CharField(max_length=256, index=True)  # Member identity (lowercased email)

    class Meta:
        table = "group_members"
        unique_together = (("group", "email"),)

class GroupMessage(models.Model):
    # Auto-increment id doubles as the append order
    id = fields.IntField(pk=True)
    group = fields.ForeignKeyField("models.Group", related_name="messages", on_delete=fields.CASCADE)
    sender = fields.CharField(max_length=256)  # Sender email
    text = fields.TextField()
    timestamp = fields.DatetimeField()

    class Meta:
        table = "group_messages"
        ordering = ["id"]

    def to_dict(self) -> dict:
        return {
            "sender": self.sender,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }
