from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.user import UserPreferences, UserPreferencesUpdate, UserSearchResult
from app.modules.user_management.services.search import search_users
from app.modules.user_management.services.user import update_preferences

router = APIRouter()

@router.get("/search", response_model=List[UserSearchResult])
def search_people(
    *,
    db: Session = Depends(get_db),
    query: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.SEARCH_DEFAULT_LIMIT, ge=1, le=settings.SEARCH_MAX_LIMIT),
    exclude_connected: bool = Query(False, alias="excludeConnected"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Search users by name, nickname or email; short queries return an empty list"""
    return search_users(
        db,
        current_user.id,
        query,
        page=page,
        limit=limit,
        exclude_connected=exclude_connected,
    )

@router.get("/me/preferences", response_model=UserPreferences)
def read_my_preferences(
    *,
    current_user: User = Depends(get_current_user),
) -> Any:
    return current_user

@router.patch("/me/preferences", response_model=UserPreferences)
def update_my_preferences(
    *,
    db: Session = Depends(get_db),
    preferences_in: UserPreferencesUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Update privacy switches: search visibility and who sees reactions"""
    return update_preferences(db, current_user, preferences_in)
