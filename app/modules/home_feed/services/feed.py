from datetime import datetime, timedelta, timezone
from typing import List, Optional
import logging
import math

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import DomainError
from app.modules.friendships.services.friendship import get_friend_ids
from app.modules.home_feed.schemas.feed import FeedActivity, FeedItem, FeedResponse, Pagination
from app.modules.user_management.models.user import User as UserModel
from app.modules.user_management.services.user import get_display_name, get_users_by_ids
from app.modules.workouts.models.workout import Workout
from app.modules.workouts.reactions.schemas.reaction import ReactionSummary
from app.modules.workouts.reactions.services.reaction import get_reactions_for_workouts, summarize_reactions
from app.modules.workouts.services.workout import get_workouts_for_owners

logger = logging.getLogger(__name__)

FEED_PERIODS = ("all", "week", "month", "quarter", "year")
DEFAULT_WORKOUT_TITLE = "Workout"
DEFAULT_USER_NAME = "Athlete"

def get_home_feed(
    db: Session,
    user_id: str,
    page: int = 1,
    limit: Optional[int] = None,
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
    period: Optional[str] = None,
) -> FeedResponse:
    """Workouts of the user and their friends, newest first, one page at a time"""
    page = max(page or 1, 1)
    limit = min(max(limit or settings.FEED_DEFAULT_LIMIT, 1), settings.FEED_MAX_LIMIT)

    friend_ids = get_friend_ids(db, user_id)
    owner_ids = set(friend_ids) | {user_id}

    start, end = _resolve_period(period_start, period_end, period)
    workouts = get_workouts_for_owners(db, owner_ids, start, end)

    # Sort the full candidate set before slicing so page boundaries are stable
    workouts.sort(key=lambda workout: (workout.start_time, workout.id), reverse=True)

    total = len(workouts)
    offset = (page - 1) * limit
    page_workouts = workouts[offset:offset + limit]

    reactions = get_reactions_for_workouts(db, (workout.id for workout in page_workouts))
    users = get_users_by_ids(
        db,
        [workout.user_id for workout in page_workouts]
        + [reaction.user_id for group in reactions.values() for reaction in group],
    )
    feed_items = []
    for workout in page_workouts:
        owner = users.get(workout.user_id)
        feed_items.append(_create_feed_item(
            workout,
            owner,
            user_id,
            summarize_reactions(reactions.get(workout.id, []), owner, user_id, users),
        ))
    logger.debug(f"Feed for {user_id}: {len(friend_ids)} friends, {total} workouts, page {page}")

    return FeedResponse(
        workouts=feed_items,
        has_friends=len(friend_ids) > 0,
        pagination=build_pagination(page, limit, total),
    )

def build_pagination(page: int, limit: int, total_items: int) -> Pagination:
    total_pages = max(math.ceil(total_items / limit), 1)
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total_items,
        has_next=page < total_pages,
        has_prev=page > 1,
    )

def period_start_for(period: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of the named calendar period containing ``now`` (UTC, weeks start on Sunday)"""
    if period is None or period == "all":
        return None
    if period not in FEED_PERIODS:
        raise DomainError(f"Invalid period '{period}'")

    now = now or datetime.utcnow()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return midnight - timedelta(days=(now.weekday() + 1) % 7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "quarter":
        return midnight.replace(month=((now.month - 1) // 3) * 3 + 1, day=1)
    return midnight.replace(month=1, day=1)

def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Workout times are stored as naive UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def _resolve_period(period_start, period_end, period):
    start = _to_naive_utc(period_start)
    end = _to_naive_utc(period_end)
    if start is None and end is None:
        start = period_start_for(period)
    if start is not None and end is not None and start > end:
        raise DomainError("Period start must not be after period end")
    return start, end

def _create_feed_item(
    workout: Workout,
    owner: Optional[UserModel],
    user_id: str,
    reactions: List[ReactionSummary],
) -> FeedItem:
    """Transform a workout and its owner into a feed entry"""
    activities = [
        FeedActivity(
            id=activity.id,
            activity_type=activity.activity_type,
            amount=activity.quantity or 0,
            points=activity.points_earned or 0,
        )
        for activity in workout.activities
    ]

    return FeedItem(
        workout_id=workout.id,
        workout_title=workout.title or DEFAULT_WORKOUT_TITLE,
        workout_notes=workout.notes,
        start_time=workout.start_time,
        user_id=workout.user_id,
        user_name=get_display_name(owner, fallback=DEFAULT_USER_NAME) if owner else DEFAULT_USER_NAME,
        user_avatar=owner.avatar_url if owner else None,
        user_first_name=owner.first_name if owner else None,
        user_last_name=owner.last_name if owner else None,
        is_own_workout=workout.user_id == user_id,
        activities=activities,
        reactions=reactions,
        total_points=sum(activity.points for activity in activities),
    )
