"""
Notification events service.
This module turns friend lifecycle events and workout reactions
into stored notifications.

Every helper here is best-effort: a failure is logged and reported as
False, never raised, so the event that triggered it is not undone.
"""
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
import logging

from app.modules.notifications.services.notification import create_notification
from app.modules.notifications.schemas.notification import NotificationCreate
from app.modules.user_management.services.user import get_display_name, get_user

# Set up logger
logger = logging.getLogger(__name__)

FRIEND_REQUEST_RECEIVED = "friend-request-received"
FRIEND_REQUEST_ACCEPTED = "friend-request-accepted"
FRIEND_REQUEST_DECLINED = "friend-request-declined"
WORKOUT_REACTION = "workout-reaction"

def notify(
    db: Session,
    user_id: str,
    type: str,
    title: str,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    actor_id: Optional[str] = None,
) -> bool:
    """
    Hand a notification to the delivery sink.

    Args:
        db: Database session
        user_id: ID of the user to notify
        type: Event type, e.g. "friend-request-accepted"
        title: Short headline
        message: Human readable text
        payload: Event data for the client
        actor_id: ID of the user who triggered the event

    Returns:
        True if notification was stored, False otherwise
    """
    try:
        create_notification(db, NotificationCreate(
            user_id=user_id,
            actor_id=actor_id,
            type=type,
            title=title,
            message=message,
            payload=payload or {},
        ))
        logger.info(f"Created {type} notification for user {user_id}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating {type} notification for user {user_id}: {e}")
        return False

def _actor_name(db: Session, actor_id: str) -> Optional[str]:
    actor = get_user(db, actor_id)
    if not actor:
        return None
    return get_display_name(actor, fallback="A user")

def create_friend_request_notification(db: Session, requester_id: str, target_id: str, request_id: str) -> bool:
    """Tell the target that someone wants to be their friend"""
    try:
        requester_name = _actor_name(db, requester_id)
        if requester_name is None:
            logger.warning(f"User {requester_id} not found when creating friend request notification")
            return False
    except Exception as e:
        logger.error(f"Error creating friend request notification: {e}")
        return False

    return notify(
        db,
        user_id=target_id,
        type=FRIEND_REQUEST_RECEIVED,
        title="New friend request",
        message=f"{requester_name} wants to be your friend.",
        payload={
            "requesterId": requester_id,
            "requesterName": requester_name,
            "requestId": request_id,
        },
        actor_id=requester_id,
    )

def create_friend_request_accepted_notification(
    db: Session,
    accepter_id: str,
    requester_id: str,
    friendship_id: str,
    message: Optional[str] = None,
) -> bool:
    """
    Tell the requester that their request was accepted.

    Args:
        db: Database session
        accepter_id: ID of the user who accepted the request
        requester_id: ID of the user who sent the original request
        friendship_id: ID of the resulting friendship edge
        message: Override for the default text (used by invite links)

    Returns:
        True if notification was created, False otherwise
    """
    try:
        accepter_name = _actor_name(db, accepter_id)
        if accepter_name is None:
            logger.warning(f"User {accepter_id} not found when creating friend accepted notification")
            return False
    except Exception as e:
        logger.error(f"Error creating friend request accepted notification: {e}")
        return False

    return notify(
        db,
        user_id=requester_id,
        type=FRIEND_REQUEST_ACCEPTED,
        title="Friend request accepted",
        message=message or f"{accepter_name} accepted your friend request. You are now friends!",
        payload={
            "friendId": accepter_id,
            "friendName": accepter_name,
            "friendshipId": friendship_id,
        },
        actor_id=accepter_id,
    )

def create_friend_request_declined_notification(db: Session, decliner_id: str, requester_id: str) -> bool:
    try:
        decliner_name = _actor_name(db, decliner_id)
        if decliner_name is None:
            logger.warning(f"User {decliner_id} not found when creating friend declined notification")
            return False
    except Exception as e:
        logger.error(f"Error creating friend request declined notification: {e}")
        return False

    return notify(
        db,
        user_id=requester_id,
        type=FRIEND_REQUEST_DECLINED,
        title="Friend request declined",
        message=f"{decliner_name} declined your friend request.",
        payload={
            "userId": decliner_id,
            "userName": decliner_name,
        },
        actor_id=decliner_id,
    )

def create_workout_reaction_notification(db: Session, reactor_id: str, owner_id: str, workout_id: str, emoji: str) -> bool:
    """Tell a workout's owner that a friend reacted to it"""
    try:
        reactor_name = _actor_name(db, reactor_id)
        if reactor_name is None:
            logger.warning(f"User {reactor_id} not found when creating workout reaction notification")
            return False
    except Exception as e:
        logger.error(f"Error creating workout reaction notification: {e}")
        return False

    return notify(
        db,
        user_id=owner_id,
        type=WORKOUT_REACTION,
        title="New reaction on your workout",
        message=f"{reactor_name} reacted with {emoji} to your workout",
        payload={
            "workoutId": workout_id,
            "emoji": emoji,
            "reactorUserId": reactor_id,
        },
        actor_id=reactor_id,
    )
