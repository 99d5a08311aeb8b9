from datetime import datetime
from typing import List, Optional, Tuple
import uuid
import logging

from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.dialects import postgresql, sqlite

from app.core.exceptions import Forbidden, InvalidTarget, NotFound
from app.modules.friendships.models.friendship import Friendship
from app.modules.friendships.schemas.friendship import FriendSummary
from app.modules.user_management.services.user import get_display_name, get_users_by_ids

logger = logging.getLogger(__name__)

# Dialects that understand INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_FREE_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def canonical_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """Order two user ids so an unordered pair has exactly one representation"""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)

def _involves(user_id: str):
    return or_(Friendship.user_one_id == user_id, Friendship.user_two_id == user_id)

def get_edge(db: Session, user_a: str, user_b: str) -> Optional[Friendship]:
    """Get the friendship between two users, whichever side asks"""
    user_one_id, user_two_id = canonical_pair(user_a, user_b)
    return db.query(Friendship).filter(
        Friendship.user_one_id == user_one_id,
        Friendship.user_two_id == user_two_id,
    ).first()

def get_edge_by_id(db: Session, friendship_id: str) -> Optional[Friendship]:
    return db.query(Friendship).filter(Friendship.id == friendship_id).first()

def has_edge(db: Session, user_a: str, user_b: str) -> bool:
    """Check if two users are friends"""
    return get_edge(db, user_a, user_b) is not None

def add_edge(db: Session, user_a: str, user_b: str) -> Friendship:
    """Insert the canonical edge for a pair unless it already exists.

    Does not commit; the caller owns the transaction so the edge lands
    together with whatever state change produced it.
    """
    if user_a == user_b:
        raise InvalidTarget("A user cannot befriend themselves")

    user_one_id, user_two_id = canonical_pair(user_a, user_b)
    values = dict(
        id=str(uuid.uuid4()),
        user_one_id=user_one_id,
        user_two_id=user_two_id,
        created_at=datetime.utcnow(),
    )

    insert = _CONFLICT_FREE_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        db.execute(
            insert(Friendship)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["user_one_id", "user_two_id"])
        )
    elif get_edge(db, user_one_id, user_two_id) is None:
        db.add(Friendship(**values))
        db.flush()

    edge = get_edge(db, user_one_id, user_two_id)
    logger.info(f"Friendship edge ensured: {user_one_id} <-> {user_two_id} ({edge.id})")
    return edge

def get_friend_ids(db: Session, user_id: str) -> List[str]:
    """Get the ids of everyone sharing an edge with the user"""
    rows = db.query(Friendship.user_one_id, Friendship.user_two_id).filter(_involves(user_id)).all()
    return [user_two_id if user_one_id == user_id else user_one_id for user_one_id, user_two_id in rows]

def list_friends(db: Session, user_id: str) -> List[FriendSummary]:
    """Get a user's friends, newest friendship first"""
    edges = (
        db.query(Friendship)
        .filter(_involves(user_id))
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
        .all()
    )
    users = get_users_by_ids(db, (edge.other_user_id(user_id) for edge in edges))

    friends = []
    for edge in edges:
        friend = users.get(edge.other_user_id(user_id))
        if friend is None:
            logger.warning(f"Friendship {edge.id} exists but user not found: {edge.other_user_id(user_id)}")
            continue
        friends.append(FriendSummary(
            id=friend.id,
            friendship_id=edge.id,
            display_name=get_display_name(friend),
            avatar_url=friend.avatar_url,
            first_name=friend.first_name,
            last_name=friend.last_name or "",
            nickname=friend.nickname,
            friends_since=edge.created_at,
        ))
    return friends

def remove_edge(db: Session, friendship_id: str, actor_id: str) -> None:
    """Unfriend: either party may delete the edge without approval"""
    edge = get_edge_by_id(db, friendship_id)
    if edge is None:
        raise NotFound("Friendship not found")
    if not edge.involves(actor_id):
        raise Forbidden("You are not allowed to remove this friendship")

    db.delete(edge)
    db.commit()
    logger.info(f"Friendship {friendship_id} removed by {actor_id}")
