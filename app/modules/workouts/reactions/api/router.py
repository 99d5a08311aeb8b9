from typing import Any

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.workouts.reactions.schemas.reaction import ReactionCreate, ReactionList
from app.modules.workouts.reactions.services.reaction import (
    list_reactions,
    react_to_workout,
    remove_reaction,
)

router = APIRouter()

@router.post("", response_model=ReactionList, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ReactionList, status_code=status.HTTP_201_CREATED)
def create_or_update_workout_reaction(
    *,
    db: Session = Depends(get_db),
    reaction_in: ReactionCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """React to a friend's workout; a second reaction replaces the first"""
    return ReactionList(
        reactions=react_to_workout(db, current_user.id, reaction_in.workout_id, reaction_in.emoji)
    )

@router.get("/workout/{workout_id}", response_model=ReactionList)
def read_workout_reactions(
    *,
    db: Session = Depends(get_db),
    workout_id: str = Path(..., description="The ID of the workout to get reactions for"),
    current_user: User = Depends(get_current_user),
) -> Any:
    return ReactionList(reactions=list_reactions(db, workout_id, current_user.id))

@router.delete("/{workout_id}", response_model=ReactionList)
def delete_workout_reaction(
    *,
    db: Session = Depends(get_db),
    workout_id: str = Path(..., description="The ID of the workout to remove the reaction from"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Remove the current user's reaction from a workout"""
    return ReactionList(reactions=remove_reaction(db, current_user.id, workout_id))
