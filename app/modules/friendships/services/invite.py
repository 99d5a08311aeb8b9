"""
Invitation links: a user mints a signed link, whoever opens it while logged
in becomes their friend without a separate request/accept round trip.

Minting the link is the inviter's consent, so redeeming it records a request
from the inviter that the opener accepts. Opening a bare profile link
without a valid token only sends an ordinary friend request.
"""
from datetime import datetime
from typing import Optional, Tuple
import uuid
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AlreadyFriends, Forbidden, InvalidTarget, NotFound, RequestAlreadyPending
from app.core.security import create_invite_token, verify_invite_token
from app.modules.friendships.models.friendship import FriendRequest, FriendRequestStatus
from app.modules.friendships.schemas.friendship import InviteAccepted, InviteLink, InviterInfo
from app.modules.friendships.services.friend_request import (
    create_request,
    get_pending_request_between,
    mark_responded,
    respond_to_request,
)
from app.modules.friendships.services.friendship import add_edge, canonical_pair, get_edge, has_edge
from app.modules.notifications.services.notification_events import create_friend_request_accepted_notification
from app.modules.user_management.services.user import get_display_name, get_user

logger = logging.getLogger(__name__)

def get_inviter(db: Session, inviter_id: str) -> InviterInfo:
    inviter = get_user(db, inviter_id)
    if inviter is None:
        raise NotFound("User not found")
    return InviterInfo(
        id=inviter.id,
        display_name=get_display_name(inviter),
        avatar_url=inviter.avatar_url,
    )

def create_invite_link(inviter_id: str) -> InviteLink:
    """Mint an invite token only the given user can hand out"""
    logger.info(f"Invite token minted for {inviter_id}")
    return InviteLink(inviter_id=inviter_id, token=create_invite_token(inviter_id))

def accept_invite(
    db: Session,
    actor_id: str,
    inviter_id: str,
    token: Optional[str] = None,
) -> Tuple[InviteAccepted, bool]:
    """Act on the inviter's link.

    A pending request from the inviter to the actor is accepted. Otherwise a
    valid token creates the friendship and a missing one sends a friend
    request to the inviter. Returns the outcome and whether a new record
    (request or friendship) was created.
    """
    if actor_id == inviter_id:
        raise InvalidTarget()

    if get_user(db, inviter_id) is None:
        raise NotFound("Inviting user not found")

    if has_edge(db, actor_id, inviter_id):
        raise AlreadyFriends()

    pending = get_pending_request_between(db, actor_id, inviter_id)
    if pending is not None and pending.requester_id == actor_id:
        # Only the inviter can answer the actor's own request
        raise RequestAlreadyPending("Your friend request is still waiting for an answer")

    if pending is not None:
        respond_to_request(db, actor_id, pending.id, "accept")
        edge = get_edge(db, actor_id, inviter_id)
        logger.info(f"Invite from {inviter_id} accepted pending request {pending.id} for {actor_id}")
        return InviteAccepted(
            type="accepted",
            friendship_id=edge.id,
            request_id=pending.id,
            message="Friend request accepted.",
        ), False

    if token is None:
        friend_request = create_request(db, actor_id, inviter_id)
        return InviteAccepted(
            type="request_sent",
            request_id=friend_request.id,
            message="Friend request sent.",
        ), True

    if not verify_invite_token(token, inviter_id):
        raise Forbidden("Invite link is invalid or expired")

    friend_request, friendship = _accept_on_behalf_of_inviter(db, actor_id, inviter_id)
    logger.info(f"Invite from {inviter_id} created friendship {friendship.id} with {actor_id}")

    actor = get_user(db, actor_id)
    create_friend_request_accepted_notification(
        db,
        accepter_id=actor_id,
        requester_id=inviter_id,
        friendship_id=friendship.id,
        message=f"{get_display_name(actor, fallback='A user')} accepted your invitation. You are now friends!",
    )
    return InviteAccepted(
        type="friendship_created",
        friendship_id=friendship.id,
        request_id=friend_request.id,
        message="Friendship created.",
    ), True

def _accept_on_behalf_of_inviter(db: Session, actor_id: str, inviter_id: str):
    pair_low_id, pair_high_id = canonical_pair(actor_id, inviter_id)
    friend_request = FriendRequest(
        id=str(uuid.uuid4()),
        requester_id=inviter_id,
        target_id=actor_id,
        pair_low_id=pair_low_id,
        pair_high_id=pair_high_id,
        status=FriendRequestStatus.pending,
        created_at=datetime.utcnow(),
    )
    request_id = friend_request.id
    db.add(friend_request)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise RequestAlreadyPending()

    try:
        mark_responded(db, request_id, FriendRequestStatus.accepted)
        friendship = add_edge(db, inviter_id, actor_id)
    except Exception:
        db.rollback()
        raise
    db.commit()
    return friend_request, friendship
