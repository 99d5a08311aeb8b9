from datetime import datetime
from typing import List, Optional
import uuid
import logging

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AlreadyFriends,
    DomainError,
    Forbidden,
    InvalidState,
    InvalidTarget,
    NotFound,
    RequestAlreadyPending,
)
from app.modules.friendships.models.friendship import FriendRequest, FriendRequestStatus
from app.modules.friendships.schemas.friendship import (
    FriendRequestEntry,
    FriendRequestLists,
    FriendshipStatusOut,
)
from app.modules.friendships.services.friendship import add_edge, canonical_pair, get_edge
from app.modules.notifications.services.notification_events import (
    create_friend_request_notification,
    create_friend_request_accepted_notification,
    create_friend_request_declined_notification,
)
from app.modules.user_management.services.user import get_user, get_users_by_ids, to_user_summary

logger = logging.getLogger(__name__)

REQUEST_ACTIONS = ("accept", "decline")

# The only legal moves of a request; anything else is an invalid state
_TRANSITIONS = {
    (FriendRequestStatus.pending, "accept"): FriendRequestStatus.accepted,
    (FriendRequestStatus.pending, "decline"): FriendRequestStatus.declined,
}

def next_status(current: FriendRequestStatus, action: str) -> FriendRequestStatus:
    """Resolve the status a request moves to when the target applies an action"""
    if action not in REQUEST_ACTIONS:
        raise DomainError(f"Invalid action '{action}'")
    try:
        return _TRANSITIONS[(FriendRequestStatus(current), action)]
    except KeyError:
        raise InvalidState(f"Friend request already {FriendRequestStatus(current).value}")

# Request lookups
def get_request_by_id(db: Session, request_id: str) -> Optional[FriendRequest]:
    """Get friend request by ID"""
    return db.query(FriendRequest).filter(FriendRequest.id == request_id).first()

def get_pending_request_between(db: Session, user_a: str, user_b: str) -> Optional[FriendRequest]:
    """Get the pending request between two users, in either direction"""
    return db.query(FriendRequest).filter(
        or_(
            and_(FriendRequest.requester_id == user_a, FriendRequest.target_id == user_b),
            and_(FriendRequest.requester_id == user_b, FriendRequest.target_id == user_a),
        ),
        FriendRequest.status == FriendRequestStatus.pending,
    ).first()

def _pending_requests(db: Session, field, user_id: str) -> List[FriendRequest]:
    return (
        db.query(FriendRequest)
        .filter(field == user_id, FriendRequest.status == FriendRequestStatus.pending)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
        .all()
    )

def mark_responded(db: Session, request_id: str, new_status: FriendRequestStatus) -> bool:
    """Move a request out of pending; False when someone else got there first"""
    updated = db.query(FriendRequest).filter(
        FriendRequest.id == request_id,
        FriendRequest.status == FriendRequestStatus.pending,
    ).update(
        {FriendRequest.status: new_status, FriendRequest.responded_at: datetime.utcnow()},
        synchronize_session=False,
    )
    return updated == 1

# Lifecycle operations
def create_request(db: Session, actor_id: str, target_id: str) -> FriendRequest:
    """Send a friend request from actor to target"""
    if actor_id == target_id:
        raise InvalidTarget()

    if get_user(db, target_id) is None:
        raise NotFound("Target user not found")

    if get_edge(db, actor_id, target_id) is not None:
        raise AlreadyFriends()

    if get_pending_request_between(db, actor_id, target_id) is not None:
        raise RequestAlreadyPending()

    pair_low_id, pair_high_id = canonical_pair(actor_id, target_id)
    friend_request = FriendRequest(
        id=str(uuid.uuid4()),
        requester_id=actor_id,
        target_id=target_id,
        pair_low_id=pair_low_id,
        pair_high_id=pair_high_id,
        status=FriendRequestStatus.pending,
    )
    db.add(friend_request)
    try:
        db.commit()
    except IntegrityError:
        # A mutual request landed between our check and our insert
        db.rollback()
        raise RequestAlreadyPending()
    db.refresh(friend_request)
    logger.info(f"Friend request {friend_request.id} created: {actor_id} -> {target_id}")

    create_friend_request_notification(
        db,
        requester_id=actor_id,
        target_id=target_id,
        request_id=friend_request.id,
    )
    return friend_request

def list_requests(db: Session, user_id: str) -> FriendRequestLists:
    """Get pending incoming and outgoing requests, newest first"""
    incoming = _pending_requests(db, FriendRequest.target_id, user_id)
    outgoing = _pending_requests(db, FriendRequest.requester_id, user_id)
    users = get_users_by_ids(
        db,
        [r.requester_id for r in incoming] + [r.target_id for r in outgoing],
    )

    def to_entries(requests: List[FriendRequest], type: str, counterpart: str) -> List[FriendRequestEntry]:
        entries = []
        for request in requests:
            user = users.get(getattr(request, counterpart))
            if user is None:
                logger.warning(f"Friend request {request.id} references missing user {getattr(request, counterpart)}")
                continue
            entries.append(FriendRequestEntry(
                type=type,
                request_id=request.id,
                created_at=request.created_at,
                user=to_user_summary(user),
            ))
        return entries

    return FriendRequestLists(
        incoming=to_entries(incoming, "incoming", "requester_id"),
        outgoing=to_entries(outgoing, "outgoing", "target_id"),
    )

def respond_to_request(db: Session, actor_id: str, request_id: str, action: str) -> FriendRequestStatus:
    """Accept or decline a request; only its target may do so"""
    friend_request = get_request_by_id(db, request_id)
    if friend_request is None:
        raise NotFound("Friend request not found")

    if friend_request.target_id != actor_id:
        raise Forbidden("Only the recipient can respond to this friend request")

    new_status = next_status(friend_request.status, action)
    requester_id = friend_request.requester_id

    if not mark_responded(db, request_id, new_status):
        db.rollback()
        raise InvalidState("Friend request was already handled")

    friendship = None
    if new_status == FriendRequestStatus.accepted:
        try:
            friendship = add_edge(db, requester_id, actor_id)
        except Exception:
            db.rollback()
            raise
    db.commit()
    logger.info(f"Friend request {request_id} {new_status.value} by {actor_id}")

    if friendship is not None:
        create_friend_request_accepted_notification(
            db,
            accepter_id=actor_id,
            requester_id=requester_id,
            friendship_id=friendship.id,
        )
    else:
        create_friend_request_declined_notification(db, decliner_id=actor_id, requester_id=requester_id)

    return new_status

def cancel_request(db: Session, actor_id: str, request_id: str) -> None:
    """Withdraw a pending request; the row is deleted so it cannot block a resend"""
    friend_request = get_request_by_id(db, request_id)
    if friend_request is None:
        raise NotFound("Friend request not found")

    if friend_request.requester_id != actor_id:
        raise Forbidden("You can only withdraw your own friend requests")

    if friend_request.status != FriendRequestStatus.pending:
        raise InvalidState("This friend request was already handled")

    deleted = db.query(FriendRequest).filter(
        FriendRequest.id == request_id,
        FriendRequest.status == FriendRequestStatus.pending,
    ).delete(synchronize_session=False)
    if deleted == 0:
        db.rollback()
        raise NotFound("Friend request not found")

    db.commit()
    logger.info(f"Friend request {request_id} withdrawn by {actor_id}")

def get_friendship_status(db: Session, actor_id: str, user_id: str) -> FriendshipStatusOut:
    """Describe how the actor relates to another user"""
    if get_user(db, user_id) is None:
        raise NotFound("User not found")

    if actor_id == user_id:
        return FriendshipStatusOut(status="self")

    edge = get_edge(db, actor_id, user_id)
    if edge is not None:
        return FriendshipStatusOut(status="friends", friendship_id=edge.id)

    pending = get_pending_request_between(db, actor_id, user_id)
    if pending is None:
        return FriendshipStatusOut(status="not_friends")
    if pending.requester_id == actor_id:
        return FriendshipStatusOut(status="request_sent", request_id=pending.id)
    return FriendshipStatusOut(status="request_received", request_id=pending.id)
