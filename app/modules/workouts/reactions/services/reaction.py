from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional
import uuid
import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidTarget, NotFound
from app.modules.friendships.services.friendship import has_edge
from app.modules.notifications.services.notification_events import create_workout_reaction_notification
from app.modules.user_management.models.user import User
from app.modules.user_management.services.user import get_display_name, get_users_by_ids
from app.modules.workouts.models.workout import Workout
from app.modules.workouts.reactions.models.reaction import WorkoutReaction
from app.modules.workouts.reactions.schemas.reaction import ReactionSummary, ReactionUser
from app.modules.workouts.services.workout import get_workout

logger = logging.getLogger(__name__)

DEFAULT_REACTOR_NAME = "Athlete"

# Dialects that understand INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

def get_reactions_for_workouts(db: Session, workout_ids: Iterable[str]) -> Dict[str, List[WorkoutReaction]]:
    """Get reactions keyed by workout ID in a single query"""
    ids = list(set(workout_ids))
    if not ids:
        return {}
    grouped = defaultdict(list)
    reactions = (
        db.query(WorkoutReaction)
        .filter(WorkoutReaction.workout_id.in_(ids))
        .order_by(WorkoutReaction.created_at, WorkoutReaction.id)
        .all()
    )
    for reaction in reactions:
        grouped[reaction.workout_id].append(reaction)
    return dict(grouped)

def summarize_reactions(
    reactions: List[WorkoutReaction],
    owner: Optional[User],
    viewer_id: str,
    users: Dict[str, User],
) -> List[ReactionSummary]:
    """Group reactions by emoji, honouring the owner's reaction privacy"""
    is_own_workout = owner is not None and owner.id == viewer_id
    if not is_own_workout and owner is not None and not owner.reactions_friends_can_see:
        return []
    show_names = is_own_workout or owner is None or owner.reactions_show_names

    by_emoji = defaultdict(list)
    for reaction in reactions:
        by_emoji[reaction.emoji].append(reaction)

    summaries = []
    for emoji in sorted(by_emoji):
        group = by_emoji[emoji]
        reactors = []
        if show_names:
            for reaction in group:
                reactor = users.get(reaction.user_id)
                if reactor is None:
                    continue
                reactors.append(ReactionUser(
                    id=reactor.id,
                    name=get_display_name(reactor, fallback=DEFAULT_REACTOR_NAME),
                    avatar=reactor.avatar_url,
                ))
        reacted = any(reaction.user_id == viewer_id for reaction in group)
        summaries.append(ReactionSummary(
            emoji=emoji,
            count=len(group),
            users=reactors,
            current_user_reaction=emoji if reacted else None,
        ))
    return summaries

def _ensure_workout_access(db: Session, workout_id: str, actor_id: str) -> Workout:
    """Owners and their friends may see a workout; to anyone else it does not exist"""
    workout = get_workout(db, workout_id)
    if workout is None:
        raise NotFound("Workout not found")
    if workout.user_id != actor_id and not has_edge(db, actor_id, workout.user_id):
        raise NotFound("Workout not found")
    return workout

def list_reactions(db: Session, workout_id: str, viewer_id: str) -> List[ReactionSummary]:
    workout = _ensure_workout_access(db, workout_id, viewer_id)
    return _summaries_for(db, workout, viewer_id)

def _summaries_for(db: Session, workout: Workout, viewer_id: str) -> List[ReactionSummary]:
    reactions = get_reactions_for_workouts(db, [workout.id]).get(workout.id, [])
    users = get_users_by_ids(db, [workout.user_id] + [reaction.user_id for reaction in reactions])
    return summarize_reactions(reactions, users.get(workout.user_id), viewer_id, users)

def react_to_workout(db: Session, actor_id: str, workout_id: str, emoji: str) -> List[ReactionSummary]:
    """Set the actor's reaction on a friend's workout, replacing any earlier one"""
    workout = _ensure_workout_access(db, workout_id, actor_id)
    if workout.user_id == actor_id:
        raise InvalidTarget("You cannot react to your own workout")

    now = datetime.utcnow()
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        statement = insert(WorkoutReaction).values(
            id=str(uuid.uuid4()),
            workout_id=workout_id,
            user_id=actor_id,
            emoji=emoji,
            created_at=now,
        )
        db.execute(statement.on_conflict_do_update(
            index_elements=["workout_id", "user_id"],
            set_={"emoji": statement.excluded.emoji, "created_at": statement.excluded.created_at},
        ))
    else:
        reaction = db.query(WorkoutReaction).filter(
            WorkoutReaction.workout_id == workout_id,
            WorkoutReaction.user_id == actor_id,
        ).first()
        if reaction is None:
            db.add(WorkoutReaction(
                id=str(uuid.uuid4()),
                workout_id=workout_id,
                user_id=actor_id,
                emoji=emoji,
                created_at=now,
            ))
        else:
            reaction.emoji = emoji
            reaction.created_at = now
    db.commit()
    logger.info(f"User {actor_id} reacted {emoji} to workout {workout_id}")

    create_workout_reaction_notification(
        db,
        reactor_id=actor_id,
        owner_id=workout.user_id,
        workout_id=workout_id,
        emoji=emoji,
    )
    return _summaries_for(db, workout, actor_id)

def remove_reaction(db: Session, actor_id: str, workout_id: str) -> List[ReactionSummary]:
    """Withdraw the actor's reaction; removing a missing one is a no-op"""
    workout = _ensure_workout_access(db, workout_id, actor_id)
    deleted = db.query(WorkoutReaction).filter(
        WorkoutReaction.workout_id == workout_id,
        WorkoutReaction.user_id == actor_id,
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info(f"User {actor_id} removed reaction from workout {workout_id}")
    return _summaries_for(db, workout, actor_id)
