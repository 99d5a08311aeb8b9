from typing import Any, Dict, Optional
from datetime import datetime

from app.core.schemas import APIModel

class NotificationCreate(APIModel):
    user_id: str
    type: str
    title: str
    message: str
    actor_id: Optional[str] = None  # ID of the user who triggered the notification
    payload: Dict[str, Any] = {}

class Notification(APIModel):
    """Notification model returned to client"""
    id: str
    type: str
    title: str
    message: str
    actor_id: Optional[str] = None
    payload: Dict[str, Any] = {}
    is_read: bool
    created_at: datetime

class NotificationsMarkedRead(APIModel):
    updated: int
