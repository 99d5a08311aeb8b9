from typing import List, Literal, Optional
from datetime import datetime

from pydantic import field_validator

from app.core.schemas import APIModel
from app.modules.user_management.schemas.user import UserSummary

class FriendRequestCreate(APIModel):
    target_user_id: str

    @field_validator("target_user_id")
    @classmethod
    def validate_target(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Target user id is required")
        return v

class FriendRequestCreated(APIModel):
    request_id: str

class FriendRequestRespond(APIModel):
    action: Literal["accept", "decline"]

class FriendRequestStatusOut(APIModel):
    status: str

class FriendRequestEntry(APIModel):
    """Pending request as seen by one of its two parties"""
    type: Literal["incoming", "outgoing"]
    request_id: str
    created_at: datetime
    user: UserSummary

class FriendRequestLists(APIModel):
    incoming: List[FriendRequestEntry] = []
    outgoing: List[FriendRequestEntry] = []

class FriendSummary(APIModel):
    """A friend together with the edge id needed to unfriend"""
    id: str
    friendship_id: str
    display_name: str
    avatar_url: Optional[str] = None
    first_name: str
    last_name: str
    nickname: Optional[str] = None
    friends_since: datetime

class FriendshipStatusOut(APIModel):
    status: Literal["self", "friends", "request_sent", "request_received", "not_friends"]
    request_id: Optional[str] = None
    friendship_id: Optional[str] = None

class InviterInfo(APIModel):
    id: str
    display_name: str
    avatar_url: Optional[str] = None

class InviteLookup(APIModel):
    inviter: InviterInfo

class InviteLink(APIModel):
    """Token to append to the invite URL; only its inviter can mint one"""
    inviter_id: str
    token: str

class InviteRedeem(APIModel):
    token: Optional[str] = None

class InviteAccepted(APIModel):
    type: Literal["accepted", "friendship_created", "request_sent"]
    friendship_id: Optional[str] = None
    request_id: Optional[str] = None
    message: str

class MessageOut(APIModel):
    message: str
