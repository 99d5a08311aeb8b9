from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.notifications.schemas.notification import Notification as NotificationSchema, NotificationsMarkedRead
from app.modules.notifications.services.notification import get_user_notifications, mark_all_as_read

router = APIRouter()

@router.get("", response_model=List[NotificationSchema])
@router.get("/", response_model=List[NotificationSchema])
def read_notifications(
    *,
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get notifications for the current user, newest first"""
    return get_user_notifications(db, current_user.id, skip=skip, limit=limit, unread_only=unread_only)

@router.put("/read-all", response_model=NotificationsMarkedRead)
def mark_all_notifications_read(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return NotificationsMarkedRead(updated=mark_all_as_read(db, current_user.id))
