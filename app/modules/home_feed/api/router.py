from datetime import datetime
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.home_feed.schemas.feed import FeedResponse
from app.modules.home_feed.services.feed import get_home_feed

router = APIRouter()

@router.get("/", response_model=FeedResponse)
@router.get("", response_model=FeedResponse)
def read_home_feed(
    *,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.FEED_DEFAULT_LIMIT, ge=1, le=settings.FEED_MAX_LIMIT),
    start: Optional[datetime] = Query(None, description="Inclusive lower bound on workout start time"),
    end: Optional[datetime] = Query(None, description="Inclusive upper bound on workout start time"),
    period: Optional[Literal["all", "week", "month", "quarter", "year"]] = Query(None),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get the activity feed of the current user and their friends with pagination"""
    return get_home_feed(
        db,
        current_user.id,
        page=page,
        limit=limit,
        period_start=start,
        period_end=end,
        period=period,
    )
