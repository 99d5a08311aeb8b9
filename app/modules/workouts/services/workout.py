from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import uuid

from sqlalchemy.orm import Session, selectinload

from app.modules.workouts.models.workout import Workout, WorkoutActivity

def get_workouts_for_owners(
    db: Session,
    owner_ids: Iterable[str],
    period_start: Optional[datetime] = None,
    period_end: Optional[datetime] = None,
) -> List[Workout]:
    """Bulk fetch workouts (with their activities) owned by any of the given users.

    Both period bounds are inclusive and apply to the workout start time.
    """
    ids = list(set(owner_ids))
    if not ids:
        return []

    query = (
        db.query(Workout)
        .options(selectinload(Workout.activities))
        .filter(Workout.user_id.in_(ids))
    )
    if period_start is not None:
        query = query.filter(Workout.start_time >= period_start)
    if period_end is not None:
        query = query.filter(Workout.start_time <= period_end)

    return query.all()

def create_workout(
    db: Session,
    user_id: str,
    start_time: datetime,
    title: Optional[str] = None,
    notes: Optional[str] = None,
    activities: Sequence[dict] = (),
) -> Workout:
    """Log a workout with its activity items.

    Each activity is a dict with ``activity_type``, ``quantity`` and optionally
    ``points_earned``.
    """
    workout = Workout(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        notes=notes,
        start_time=start_time,
    )
    for activity in activities:
        workout.activities.append(
            WorkoutActivity(
                id=str(uuid.uuid4()),
                activity_type=activity["activity_type"],
                quantity=activity.get("quantity", 0),
                points_earned=activity.get("points_earned", 0),
            )
        )

    db.add(workout)
    db.commit()
    db.refresh(workout)
    return workout

def get_workout(db: Session, workout_id: str) -> Optional[Workout]:
    """Get workout by ID"""
    return db.query(Workout).filter(Workout.id == workout_id).first()
