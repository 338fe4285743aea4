# tripchat/services/groups.py
"""
Group/message store.

A group is returned as one document: {id, name, members, messages}. Members
and messages live in their own tables so that appending a message is a
single insert and concurrent appends to the same group never overwrite each
other.
"""
import datetime as dt
import uuid
from tortoise.transactions import in_transaction

from tripchat.models.group import Group, GroupMember, GroupMessage
from tripchat.schemas.group import GroupOut


class GroupNotFoundError(Exception):
    """No group has this id (or the id is not a valid UUID)."""


def _parse_id(group_id) -> uuid.UUID:
    try:
        return uuid.UUID(str(group_id))
    except ValueError:
        raise GroupNotFoundError(group_id) from None


def _to_document(group: Group) -> dict:
    # members / messages must be prefetched
    messages = sorted(group.messages, key=lambda m: m.id)
    return GroupOut(
        id=str(group.id),
        name=group.name,
        members=[m.email for m in group.members],
        messages=[m.to_dict() for m in messages],
    ).model_dump()


class GroupStore:
    async def create(self, name: str, owner_email: str) -> dict:
        """Create a group whose only member is the owner."""
        async with in_transaction() as conn:
            group = await Group.create(name=name, using_db=conn)
            await GroupMember.create(group=group, email=owner_email, using_db=conn)
        await group.fetch_related("members", "messages")
        return _to_document(group)

    async def get(self, group_id) -> dict:
        gid = _parse_id(group_id)
        group = await Group.get_or_none(id=gid).prefetch_related("members", "messages")
        if group is None:
            raise GroupNotFoundError(group_id)
        return _to_document(group)

    async def list_for_member(self, email: str) -> list[dict]:
        """All groups whose member list contains the email, oldest first."""
        groups = (
            await Group.filter(members__email=email)
            .distinct()
            .order_by("created_at")
            .prefetch_related("members", "messages")
        )
        return [_to_document(g) for g in groups]

    async def exists(self, group_id) -> bool:
        try:
            gid = _parse_id(group_id)
        except GroupNotFoundError:
            return False
        return await Group.exists(id=gid)

    async def is_member(self, group_id, email: str) -> bool:
        gid = _parse_id(group_id)
        return await GroupMember.exists(group_id=gid, email=email)

    async def append_message(self, group_id, sender: str, text: str) -> dict:
        """
        Append a message to the group's log.

        Returns:
            The stored message: {sender, text, timestamp}

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        gid = _parse_id(group_id)
        if not await Group.exists(id=gid):
            raise GroupNotFoundError(group_id)
        message = await GroupMessage.create(
            group_id=gid,
            sender=sender,
            text=text,
            timestamp=dt.datetime.now(dt.timezone.utc),
        )
        return message.to_dict()
