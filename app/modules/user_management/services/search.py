from typing import List, Optional
import logging
import unicodedata

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.modules.friendships.models.friendship import FriendRequest, FriendRequestStatus, Friendship
from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.user import UserSearchResult
from app.modules.user_management.services.user import get_display_name

logger = logging.getLogger(__name__)

def extract_search_term(value: Optional[str]) -> Optional[str]:
    """Return the trimmed query, or None when it is too short to search"""
    if not value or not isinstance(value, str):
        return None
    trimmed = value.strip()
    if len(trimmed) < settings.SEARCH_MIN_QUERY_LENGTH:
        return None
    return trimmed

def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

def name_sort_key(value: Optional[str]) -> str:
    """Case- and diacritics-insensitive key, so "Émile" sorts next to "Emil" """
    decomposed = unicodedata.normalize("NFKD", value or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()

def _connected_to(actor_id: str):
    """Users the actor is already friends with or has a pending request with"""
    befriended = exists().where(
        or_(
            and_(Friendship.user_one_id == actor_id, Friendship.user_two_id == User.id),
            and_(Friendship.user_one_id == User.id, Friendship.user_two_id == actor_id),
        )
    )
    pending = exists().where(
        FriendRequest.status == FriendRequestStatus.pending,
        or_(
            and_(FriendRequest.requester_id == actor_id, FriendRequest.target_id == User.id),
            and_(FriendRequest.requester_id == User.id, FriendRequest.target_id == actor_id),
        ),
    )
    return or_(befriended, pending)

def search_users(
    db: Session,
    actor_id: str,
    query: Optional[str],
    page: int = 1,
    limit: Optional[int] = None,
    exclude_connected: bool = False,
) -> List[UserSearchResult]:
    """Find people by name, nickname or email, never returning the searcher"""
    term = extract_search_term(query)
    if term is None:
        return []

    page = max(page or 1, 1)
    limit = min(max(limit or settings.SEARCH_DEFAULT_LIMIT, 1), settings.SEARCH_MAX_LIMIT)

    pattern = _like_pattern(term)
    db_query = db.query(User).filter(
        or_(
            User.first_name.ilike(pattern, escape="\\"),
            User.last_name.ilike(pattern, escape="\\"),
            User.nickname.ilike(pattern, escape="\\"),
            User.email.ilike(pattern, escape="\\"),
        ),
        User.id != actor_id,
        User.is_active.is_(True),
        User.public_profile.is_(True),
    )
    if exclude_connected:
        db_query = db_query.filter(~_connected_to(actor_id))

    # Sorted in Python: database collations disagree on accented names
    matches = sorted(
        db_query.all(),
        key=lambda user: (name_sort_key(user.first_name), name_sort_key(user.last_name), user.id),
    )
    offset = (page - 1) * limit
    logger.debug(f"User search by {actor_id} for '{term}': {len(matches)} matches")

    return [
        UserSearchResult(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name or "",
            nickname=user.nickname,
            display_name=get_display_name(user),
            avatar_url=user.avatar_url,
        )
        for user in matches[offset:offset + limit]
    ]
