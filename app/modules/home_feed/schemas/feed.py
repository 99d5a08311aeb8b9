from typing import List, Optional
from datetime import datetime

from app.core.schemas import APIModel
from app.modules.workouts.reactions.schemas.reaction import ReactionSummary

class FeedActivity(APIModel):
    id: str
    activity_type: str
    amount: float
    points: int

class FeedItem(APIModel):
    """One workout in the feed, with its owner's display data inlined"""
    workout_id: str
    workout_title: str
    workout_notes: Optional[str] = None
    start_time: datetime
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    is_own_workout: bool
    activities: List[FeedActivity] = []
    reactions: List[ReactionSummary] = []
    total_points: int = 0

class Pagination(APIModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool

class FeedResponse(APIModel):
    """Feed response model returned to client"""
    workouts: List[FeedItem] = []
    has_friends: bool
    pagination: Pagination
