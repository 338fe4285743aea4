# tripchat/schemas/group.py
"""
Pydantic schemas for group and message endpoints.
"""
from pydantic import BaseModel, constr
from typing import List

class CreateGroupIn(BaseModel):
    """Request model for creating a group; the caller becomes its only member."""
    name: constr(strip_whitespace=True, min_length=1, max_length=128)

class SendMessageIn(BaseModel):
    """Request model for posting a message to a group."""
    text: constr(min_length=1)

class MessageOut(BaseModel):
    sender: str  # Sender email
    text: str
    timestamp: str  # ISO 8601

class GroupOut(BaseModel):
    """
    Group document as returned by the API, with members and the message log embedded.
    """
    id: str
    name: str
    members: List[str]  # Member emails
    messages: List[MessageOut]  # Append order
