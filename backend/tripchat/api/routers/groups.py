# tripchat/api/routers/groups.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from tripchat.api.deps import get_broadcaster, get_current_claims, get_group_store
from tripchat.core.pubsub import Broadcaster
from tripchat.schemas.auth import TokenClaims
from tripchat.schemas.group import CreateGroupIn, GroupOut, SendMessageIn
from tripchat.services.groups import GroupNotFoundError, GroupStore

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/groups", tags=["groups"])

def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                         detail={"code": "GROUP_NOT_FOUND", "message": "Group not found"})

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    body: CreateGroupIn,
    claims: TokenClaims = Depends(get_current_claims),
    groups: GroupStore = Depends(get_group_store),
):
    """
    Create a group owned by the caller.

    The caller's email becomes the group's only member; the message log
    starts empty.

    Returns:
        dict: message and the created group document (201)
    """
    try:
        group = await groups.create(body.name, claims.email)
    except Exception:
        logger.exception("[groups] create failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "CREATE_GROUP_FAILED", "message": "Error creating group"})
    logger.info("[groups] %s created group %s", claims.email, group["id"])
    return {"message": "Group created successfully!", "group": group}

@router.get("", response_model=list[GroupOut])
async def list_groups(
    claims: TokenClaims = Depends(get_current_claims),
    groups: GroupStore = Depends(get_group_store),
):
    """
    List the groups the caller is a member of, with members and messages embedded.
    Groups the caller does not belong to are never returned.
    """
    try:
        return await groups.list_for_member(claims.email)
    except Exception:
        logger.exception("[groups] list failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "LIST_GROUPS_FAILED", "message": "Error fetching groups"})

@router.get("/{group_id}", response_model=GroupOut)
async def get_group(
    group_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    groups: GroupStore = Depends(get_group_store),
):
    """
    Get one group document. Non-members get 404, same as a missing group.
    """
    try:
        member = await groups.is_member(group_id, claims.email)
        group = await groups.get(group_id) if member else None
    except GroupNotFoundError:
        group = None
    except Exception:
        logger.exception("[groups] get failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "GET_GROUP_FAILED", "message": "Error fetching group"})
    if group is None:
        raise _not_found()
    return group

@router.post("/{group_id}/message")
async def send_message(
    group_id: str,
    body: SendMessageIn,
    claims: TokenClaims = Depends(get_current_claims),
    groups: GroupStore = Depends(get_group_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Append a message to a group and push it to the group's live subscribers.

    The sender is always the authenticated caller and must be a member of
    the group. The message is broadcast only after it has been stored.

    Returns:
        dict: message and the stored message {sender, text, timestamp}

    Error codes:
        - GROUP_NOT_FOUND (404): Unknown group id
        - NOT_A_MEMBER (403): Caller is not in the group's member list
        - SEND_MESSAGE_FAILED (500): Unexpected store failure
    """
    try:
        if not await groups.exists(group_id):
            raise GroupNotFoundError(group_id)
        member = await groups.is_member(group_id, claims.email)
        message = await groups.append_message(group_id, claims.email, body.text) if member else None
    except GroupNotFoundError:
        raise _not_found()
    except Exception:
        logger.exception("[groups] send message failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "SEND_MESSAGE_FAILED", "message": "Error sending message"})
    if message is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail={"code": "NOT_A_MEMBER", "message": "Not a member of this group"})

    delivered = await broadcaster.publish(group_id, message)
    logger.info("[groups] %s -> group %s (delivered to %d sockets)", claims.email, group_id, delivered)
    return {"message": "Message sent!", "data": message}
