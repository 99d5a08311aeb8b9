from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.friendships.schemas.friendship import (
    FriendRequestCreate,
    FriendRequestCreated,
    FriendRequestLists,
    FriendRequestRespond,
    FriendRequestStatusOut,
    FriendshipStatusOut,
    FriendSummary,
    InviteAccepted,
    InviteLink,
    InviteLookup,
    InviteRedeem,
    MessageOut,
)
from app.modules.friendships.services.friend_request import (
    cancel_request,
    create_request,
    get_friendship_status,
    list_requests,
    respond_to_request,
)
from app.modules.friendships.services.friendship import list_friends, remove_edge
from app.modules.friendships.services.invite import accept_invite, create_invite_link, get_inviter

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/invite", response_model=InviteLink, status_code=status.HTTP_201_CREATED)
def create_friend_invite(
    *,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Mint a signed invite token for the current user to share"""
    return create_invite_link(current_user.id)

@router.get("/invite/{user_id}", response_model=InviteLookup)
def read_invite(
    *,
    db: Session = Depends(get_db),
    user_id: str,
) -> Any:
    """Public: who is behind an invitation link"""
    return InviteLookup(inviter=get_inviter(db, user_id))

@router.post("/invite/{user_id}", response_model=InviteAccepted)
def accept_friend_invite(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    invite_in: Optional[InviteRedeem] = None,
    response: Response,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Redeem an invite; without a valid token this only sends a friend request"""
    token = invite_in.token if invite_in else None
    outcome, created = accept_invite(db, current_user.id, user_id, token=token)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return outcome

@router.get("", response_model=List[FriendSummary])
@router.get("/", response_model=List[FriendSummary])
def get_my_friends(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_friends(db, current_user.id)

@router.get("/requests", response_model=FriendRequestLists)
def get_my_friend_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return list_requests(db, current_user.id)

@router.post("/requests", response_model=FriendRequestCreated, status_code=status.HTTP_201_CREATED)
def send_friend_request(
    *,
    db: Session = Depends(get_db),
    request_in: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    friend_request = create_request(db, current_user.id, request_in.target_user_id)
    return FriendRequestCreated(request_id=friend_request.id)

@router.put("/requests/{request_id}", response_model=FriendRequestStatusOut)
def respond_to_friend_request(
    *,
    db: Session = Depends(get_db),
    request_id: str,
    request_in: FriendRequestRespond,
    current_user: User = Depends(get_current_user),
) -> Any:
    new_status = respond_to_request(db, current_user.id, request_id, request_in.action)
    return FriendRequestStatusOut(status=new_status.value)

@router.delete("/requests/{request_id}", response_model=MessageOut)
def cancel_friend_request(
    *,
    db: Session = Depends(get_db),
    request_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    cancel_request(db, current_user.id, request_id)
    return MessageOut(message="Friend request withdrawn.")

@router.get("/status/{user_id}", response_model=FriendshipStatusOut)
def check_friendship_status(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_friendship_status(db, current_user.id, user_id)

@router.delete("/{friendship_id}", response_model=MessageOut)
def remove_friend(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    remove_edge(db, friendship_id, current_user.id)
    return MessageOut(message="Friend removed.")
